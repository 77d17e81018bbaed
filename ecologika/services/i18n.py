from typing import Dict, Optional
from fastapi import Request

from ecologika.core.config import settings

SUPPORTED_LANGUAGES = ("pt", "en")

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "pt": {
        # Navigation
        "nav.home": "Início",
        "nav.about": "Quem Somos",
        "nav.products": "Produtos",
        "nav.login": "Entrar",
        "nav.register": "Cadastrar",
        "nav.dashboard": "Dashboard",
        "nav.logout": "Sair",

        # Landing
        "landing.title": "Marketplace Ecológico",
        "landing.subtitle": "Conectando compradores e vendedores de materiais recicláveis",
        "landing.description": "Promovemos a economia circular através de uma plataforma segura e sustentável",

        # Auth
        "auth.email": "Email",
        "auth.password": "Senha",
        "auth.buyer": "Comprador",
        "auth.seller": "Vendedor",
        "auth.invalid_credentials": "Email ou senha incorretos.",
        "auth.email_mismatch": "Os emails não coincidem.",
        "auth.password_mismatch": "As senhas não coincidem.",
        "auth.password_too_short": "A senha deve ter pelo menos 6 caracteres.",
        "auth.terms_required": "Você deve aceitar os termos e condições.",
        "auth.invalid_nif": "NIF/CNPJ inválido.",
        "auth.already_registered": "Este email já está cadastrado. Tente fazer login.",
        "auth.current_password_incorrect": "A senha atual está incorreta.",
        "auth.password_updated": "Senha atualizada com sucesso.",
        "auth.reset_sent": "Se o email existir, enviaremos instruções para redefinir a senha.",
        "auth.reset_invalid": "Link de redefinição inválido ou expirado.",
        "auth.logged_out": "Sessão encerrada.",

        # Catalog
        "products.not_found": "Produto não encontrado.",
        "products.load_error": "Não foi possível carregar os produtos.",
        "products.sellers_only": "Apenas vendedores aprovados podem anunciar produtos.",
        "products.not_owner": "Você não pode alterar este produto.",
        "products.update_error": "Não foi possível atualizar o produto.",
        "products.invalid_filters": "Filtros inválidos.",

        # Images
        "images.limit": "Você pode adicionar no máximo {max} imagens.",
        "images.invalid_format": "Apenas arquivos de imagem são permitidos.",
        "images.too_large": "{name} é muito grande. Limite de 5MB.",
        "images.not_found": "Imagem não encontrada.",
        "images.invalid_order": "A nova ordem deve conter todas as imagens do produto.",
        "images.save_error": "Não foi possível salvar as imagens.",
        "images.invalid_position": "Posição de imagem inválida.",

        # Favorites
        "favorites.error": "Não foi possível atualizar os produtos salvos.",

        # Checkout
        "checkout.address_required": "Informe o endereço de entrega.",
        "checkout.city_required": "Informe a cidade.",
        "checkout.phone_required": "Informe o telefone.",
        "checkout.quantity_invalid": "Quantidade indisponível.",
        "checkout.invalid": "Verifique os dados da compra.",
        "checkout.error": "Não foi possível concluir a compra. Tente novamente.",
        "checkout.success": "Compra realizada com sucesso!",
        "checkout.sale": "Nova venda!",

        # Admin
        "admin.not_pending": "Este registro já foi analisado.",
        "admin.update_error": "Não foi possível atualizar o registro.",
        "admin.user_approved": "Sua conta foi aprovada.",
        "admin.user_rejected": "Sua conta foi rejeitada.",
        "admin.product_approved": "Seu produto foi aprovado.",
        "admin.product_rejected": "Seu produto foi rejeitado.",
        "admin.default_user_reason": "Dados incompletos",
        "admin.default_product_reason": "Produto inadequado",

        # Common
        "common.save": "Salvar",
        "common.cancel": "Cancelar",
        "common.loading": "Carregando...",
        "common.error": "Erro",
        "common.success": "Sucesso",
        "common.not_informed": "Não informado",
        "common.generic_error": "Ocorreu um erro. Tente novamente.",
    },
    "en": {
        # Navigation
        "nav.home": "Home",
        "nav.about": "About Us",
        "nav.products": "Products",
        "nav.login": "Login",
        "nav.register": "Register",
        "nav.dashboard": "Dashboard",
        "nav.logout": "Logout",

        # Landing
        "landing.title": "Ecological Marketplace",
        "landing.subtitle": "Connecting buyers and sellers of recyclable materials",
        "landing.description": "We promote circular economy through a secure and sustainable platform",

        # Auth
        "auth.email": "Email",
        "auth.password": "Password",
        "auth.buyer": "Buyer",
        "auth.seller": "Seller",
        "auth.invalid_credentials": "Incorrect email or password.",
        "auth.email_mismatch": "Emails do not match.",
        "auth.password_mismatch": "Passwords do not match.",
        "auth.password_too_short": "Password must be at least 6 characters long.",
        "auth.terms_required": "You must accept the terms and conditions.",
        "auth.invalid_nif": "Invalid NIF/CNPJ.",
        "auth.already_registered": "This email is already registered. Try logging in.",
        "auth.current_password_incorrect": "Current password is incorrect.",
        "auth.password_updated": "Password updated successfully.",
        "auth.reset_sent": "If the email exists, we will send instructions to reset the password.",
        "auth.reset_invalid": "Invalid or expired reset link.",
        "auth.logged_out": "Signed out.",

        # Catalog
        "products.not_found": "Product not found.",
        "products.load_error": "Could not load products.",
        "products.sellers_only": "Only approved sellers can list products.",
        "products.not_owner": "You cannot change this product.",
        "products.update_error": "Could not update the product.",
        "products.invalid_filters": "Invalid filters.",

        # Images
        "images.limit": "You can add at most {max} images.",
        "images.invalid_format": "Only image files are allowed.",
        "images.too_large": "{name} is too large. Limit is 5MB.",
        "images.not_found": "Image not found.",
        "images.invalid_order": "The new order must contain every image of the product.",
        "images.save_error": "Could not save the images.",
        "images.invalid_position": "Invalid image position.",

        # Favorites
        "favorites.error": "Could not update saved products.",

        # Checkout
        "checkout.address_required": "Shipping address is required.",
        "checkout.city_required": "City is required.",
        "checkout.phone_required": "Phone is required.",
        "checkout.quantity_invalid": "Quantity not available.",
        "checkout.invalid": "Please review the purchase details.",
        "checkout.error": "Could not complete the purchase. Please try again.",
        "checkout.success": "Purchase completed successfully!",
        "checkout.sale": "New sale!",

        # Admin
        "admin.not_pending": "This record has already been reviewed.",
        "admin.update_error": "Could not update the record.",
        "admin.user_approved": "Your account has been approved.",
        "admin.user_rejected": "Your account has been rejected.",
        "admin.product_approved": "Your product has been approved.",
        "admin.product_rejected": "Your product has been rejected.",
        "admin.default_user_reason": "Incomplete data",
        "admin.default_product_reason": "Inadequate product",

        # Common
        "common.save": "Save",
        "common.cancel": "Cancel",
        "common.loading": "Loading...",
        "common.error": "Error",
        "common.success": "Success",
        "common.not_informed": "Not informed",
        "common.generic_error": "Something went wrong. Please try again.",
    },
}


def resolve_language(value: Optional[str]) -> str:
    """Map a persisted language value onto a supported language."""
    if value in SUPPORTED_LANGUAGES:
        return value
    if settings.DEFAULT_LANGUAGE in SUPPORTED_LANGUAGES:
        return settings.DEFAULT_LANGUAGE
    return SUPPORTED_LANGUAGES[0]


class Translator:
    def __init__(self, language: Optional[str] = None):
        self.language = resolve_language(language)

    def t(self, key: str, **params) -> str:
        # Missing keys render as the key itself
        text = TRANSLATIONS[self.language].get(key, key)
        if params:
            text = text.format(**params)
        return text

    def table(self) -> Dict[str, str]:
        return dict(TRANSLATIONS[self.language])


def get_translator(request: Request) -> Translator:
    return Translator(request.cookies.get(settings.LANGUAGE_COOKIE))
