"""Content-coupled expectations for the prize-draw storefront.

Everything in here mirrors what the live site currently renders: page titles,
prices, link names and exact element counts. When the site changes its
content, this is the one place to update.
"""

from functools import lru_cache
from typing import List, Tuple

from pydantic import BaseModel, Field


class SiteExpectations(BaseModel):
    """Expected content of the storefront pages."""

    # Home
    home_title_pattern: str = Field(default=r"Omaze UK", description="Home page title")
    navigation_links: List[str] = Field(
        default_factory=lambda: [
            "The Cheshire House",
            "McLaren Artura Spider",
            "Past Draws",
            "About Omaze",
            "Our Winners",
            "Draw Results",
        ],
        description="Links exposed in the primary navigation",
    )
    hero_text_patterns: List[str] = Field(
        default_factory=lambda: [r"win", r"house", r"£"],
        description="Fragments the hero section must mention",
    )
    property_tabs: List[str] = Field(
        default_factory=lambda: ["Tour", "Gallery"],
        description="Tabs of the featured property section",
    )
    footer_link_range: Tuple[int, int] = Field(
        default=(10, 50), description="Exclusive bounds on the footer link count"
    )
    social_networks: List[str] = Field(
        default_factory=lambda: ["twitter", "facebook", "instagram", "youtube"],
        description="Social networks linked from the footer",
    )

    # Entry funnel
    entry_url_pattern: str = Field(default=r"enter-cheshire", description="Entry page URL")
    entry_title_pattern: str = Field(
        default=r"Enter the Cheshire House Draw", description="Entry page title"
    )
    entry_path: str = Field(default="/pages/enter-cheshire-iii", description="Entry page path")
    entry_tabs: List[str] = Field(
        default_factory=lambda: ["Postal No purchase necessary", "Single Purchase", "Subscription"],
        description="Entry method tab buttons",
    )
    single_purchase_prices: List[str] = Field(
        default_factory=lambda: ["£10", "£25", "£45", "£145"],
        description="Single purchase package prices",
    )
    smallest_package_price: str = Field(default="£10", description="Cheapest single purchase")
    subscription_tier_count: int = Field(default=3, description="Monthly subscription tiers")
    subscription_heading: str = Field(
        default="Monthly Subscriptions", description="Subscription tab heading"
    )
    discount_text: str = Field(default="£5 OFF", description="Introductory discount banner")
    charity_name: str = Field(default="Anthony Nolan", description="Partner charity")
    postal_lines: List[str] = Field(
        default_factory=lambda: [
            "Maximum one entry per postcard",
            "Civica Election Services",
            "33 Clarendon Road",
            "N8 0NW",
        ],
        description="Lines of the postal entry instructions",
    )

    # Cart
    cart_url_pattern: str = Field(default=r"cart", description="Basket URL")
    progress_item_count: int = Field(
        default=8, description="List items in the checkout progress navigation"
    )
    special_offer_text: str = Field(default="Special Offer", description="Upsell step marker")
    ticket_sales_text: str = Field(
        default="17% of all ticket sales", description="Charity share statement"
    )

    # Checkout
    checkout_url_pattern: str = Field(default=r"checkouts", description="Checkout URL")
    checkout_title_pattern: str = Field(default=r"Checkout", description="Checkout title")
    default_country: str = Field(default="GB", description="Preselected country code")
    legal_links: List[str] = Field(
        default_factory=lambda: [
            "Terms of Use",
            "Privacy Notice",
            "Official Rules",
            "Experience Rules",
        ],
        description="Legal links shown on checkout",
    )

    # FAQs
    faqs_path: str = Field(default="/pages/faqs", description="FAQs page path")
    faqs_heading: str = Field(default="Frequently Asked Questions", description="FAQs h1")
    faq_sections: List[str] = Field(
        default_factory=lambda: [
            "Winning a Prize",
            "Entry Code",
            "Subscriptions",
            "Account Creation",
            "Payment",
            "Need Help?",
            "The Cheshire House",
            "Entering The Draw - Cheshire",
            "Anthony Nolan",
            "House Rentals",
        ],
        description="FAQ category headings",
    )
    faq_min_category_headings: int = Field(
        default=5, description="Level-2 headings must exceed this"
    )
    faq_min_question_headings: int = Field(
        default=20, description="Level-4 headings must exceed this"
    )
    faq_questions: List[str] = Field(
        default_factory=lambda: [
            "How will you contact me if I've won a prize?",
            "What are the odds of winning?",
            "How can I cancel my subscription?",
            "Can I sell the house if I don't want to move in?",
        ],
        description="Questions that must always be answered",
    )

    # Winners
    winners_path: str = Field(default="/pages/winners", description="Winners page path")
    winners_url_pattern: str = Field(default=r"winners", description="Winners page URL")
    carousel_count: int = Field(default=5, description="Winner carousels on the page")

    # Other direct routes
    direct_paths: List[str] = Field(
        default_factory=lambda: [
            "/pages/enter-cheshire-iii",
            "/pages/faqs",
            "/pages/about-omaze",
            "/pages/past-draws",
            "/pages/winners",
        ],
        description="Routes that must be reachable by direct URL",
    )
    missing_page_statuses: List[int] = Field(
        default_factory=lambda: [200, 301, 302, 404],
        description="Acceptable statuses for an unknown route",
    )

    # Performance budgets
    load_budget_ms: int = Field(default=5000, description="Home page load budget")
    entry_load_budget_ms: int = Field(default=10000, description="Entry page load budget")
    mobile_max_requests: int = Field(default=100, description="Mobile request budget")
    mobile_max_slow_requests: int = Field(default=5, description="Mobile slow request budget")
    mobile_max_megabytes: float = Field(default=10.0, description="Mobile page weight budget")
    slow_request_ms: int = Field(default=2000, description="Slow request threshold")
    min_touch_target_px: int = Field(default=30, description="Minimum touch target size")


@lru_cache(maxsize=1)
def get_site_expectations() -> SiteExpectations:
    """Get the expectations for the configured site."""
    return SiteExpectations()
