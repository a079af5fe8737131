from curtain_quoter.models.quote import Quote, QuoteStatus
from curtain_quoter.models.quote_item import QuoteItem
from curtain_quoter.models.product import Product, ProductFabric
from curtain_quoter.models.fabric import Fabric
from curtain_quoter.models.user import User
from curtain_quoter.models.authorized_user import AuthorizedUser

__all__ = [
    "Quote",
    "QuoteStatus",
    "QuoteItem",
    "Product",
    "ProductFabric",
    "Fabric",
    "User",
    "AuthorizedUser",
]
