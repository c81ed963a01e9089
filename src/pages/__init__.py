"""Page objects for the storefront end-to-end suite.

One class per logical page of the site. Each is constructed fresh per
scenario around that scenario's Playwright page and declares its elements
without touching the browser.
"""

from src.pages.base_page import BasePage
from src.pages.home_page import HomePage
from src.pages.entry_page import EntryPage
from src.pages.cart_page import CartPage
from src.pages.checkout_page import CheckoutPage
from src.pages.faqs_page import FAQsPage
from src.pages.winners_page import WinnersPage

__all__ = [
    "BasePage",
    "HomePage",
    "EntryPage",
    "CartPage",
    "CheckoutPage",
    "FAQsPage",
    "WinnersPage",
]
