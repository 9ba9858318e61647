# pcshop/presentation/forms.py

from django import forms

from pcshop.core.entities import CATEGORIAS, Produto, rotulo_categoria

# --- 1. FORMULÁRIOS ADMINISTRATIVOS ---

class ProdutoForm(forms.Form):
    """
    Formulário para adicionar ou editar Produtos no painel.
    O slug só é exibido na edição; na criação ele é derivado do nome.
    """
    nome = forms.CharField(label="Nome", max_length=200)
    categoria = forms.ChoiceField(
        label="Categoria",
        choices=[('', 'Selecione uma categoria')] + [(c, rotulo_categoria(c)) for c in CATEGORIAS],
        required=False,
    )
    fabricante = forms.CharField(label="Fabricante", max_length=100, required=False)
    modelo = forms.CharField(label="Modelo", max_length=100, required=False)
    preco = forms.DecimalField(
        label="Preço a prazo",
        max_digits=10,
        decimal_places=2,
        min_value=0,
        widget=forms.NumberInput(attrs={'step': '0.01'}),
    )
    img = forms.CharField(label="Imagem principal (URL)", max_length=500, required=False)
    img2 = forms.CharField(label="Imagem secundária (URL)", max_length=500, required=False)
    slug = forms.CharField(label="Slug (caminho da página)", max_length=200, required=False)
    garantia = forms.CharField(label="Garantia", max_length=50, required=False)
    promo = forms.BooleanField(label="Em promoção", required=False)
    destaque = forms.BooleanField(label="Em destaque", required=False)
    tags = forms.CharField(
        label="Tags",
        required=False,
        help_text="Separadas por vírgula.",
    )
    specs = forms.JSONField(
        label="Especificações (JSON)",
        required=False,
        widget=forms.Textarea(attrs={'rows': 6}),
        help_text='Ex: [{"Especificações Gerais": ["6 núcleos", "12 threads"]}]',
    )

    def clean_tags(self):
        tags = self.cleaned_data.get('tags') or ''
        return [tag.strip() for tag in tags.split(',') if tag.strip()]

    def clean_specs(self):
        specs = self.cleaned_data.get('specs')
        if specs in (None, ''):
            return []
        if not isinstance(specs, list):
            raise forms.ValidationError("As especificações devem ser uma lista JSON.")
        return specs

    @classmethod
    def initial_de(cls, produto: Produto) -> dict:
        """Valores iniciais do formulário a partir da entidade."""
        return {
            'nome': produto.nome,
            'categoria': produto.categoria,
            'fabricante': produto.fabricante,
            'modelo': produto.modelo,
            'preco': produto.preco,
            'img': produto.img,
            'img2': produto.img2,
            'slug': produto.slug,
            'garantia': produto.garantia,
            'promo': produto.promo,
            'destaque': produto.destaque,
            'tags': ', '.join(produto.tags),
            'specs': produto.specs,
        }


class ConfiguracaoPixForm(forms.Form):
    """
    Credenciais do provedor PIX.
    O segredo nunca é reenviado ao navegador; em branco, mantém o atual.
    """
    ativo = forms.BooleanField(label="Usar a API PIX", required=False)
    client_id = forms.CharField(label="Client ID", max_length=200, required=False)
    client_secret = forms.CharField(
        label="Client Secret",
        max_length=200,
        required=False,
        widget=forms.PasswordInput(render_value=False),
    )


# --- 2. FORMULÁRIOS DA LOJA ---

class AdicionarItemCarrinhoForm(forms.Form):
    quantidade = forms.IntegerField(
        min_value=1,
        initial=1,
        required=False,
        widget=forms.NumberInput(attrs={'min': '1', 'step': '1'})
    )

    def clean_quantidade(self):
        return self.cleaned_data.get('quantidade') or 1


# --- 3. FORMULÁRIOS DE CHECKOUT ---

class DadosClienteForm(forms.Form):
    """
    Etapa 1 do checkout. Os campos não são obrigatórios no formulário:
    quem bloqueia o avanço é o sequenciador do checkout.
    """
    nome = forms.CharField(label="Nome completo", max_length=200, required=False)
    email = forms.CharField(
        label="E-mail",
        max_length=254,
        required=False,
        widget=forms.EmailInput(attrs={'placeholder': 'seu@email.com'})
    )
    cpf = forms.CharField(
        label="CPF",
        max_length=14,
        required=False,
        widget=forms.TextInput(attrs={'placeholder': '000.000.000-00'})
    )


class DadosCartaoForm(forms.Form):
    """
    Pagamento com cartão simulado.
    Nenhum destes dados é gravado além do final do cartão.
    """
    numero = forms.CharField(label="Número do Cartão", max_length=23)
    titular = forms.CharField(label="Nome impresso no cartão", max_length=100)
    validade = forms.CharField(
        label="Validade",
        max_length=7,
        widget=forms.TextInput(attrs={'placeholder': 'MM/AA'})
    )
    cvv = forms.CharField(label="CVV", max_length=4, min_length=3)

    def clean_numero(self):
        numero = self.cleaned_data['numero'].replace(' ', '')
        if not numero.isdigit():
            raise forms.ValidationError("O número do cartão deve conter apenas dígitos.")
        return numero
