"""
Category projection for storefront pages.

Turns the merged product list into what a category card shows: one link per
product type, plus the fixed Sneakers / Kids Clothing Packs links. Also builds
the featured tiles and the recently added strip for the home page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from urllib.parse import quote

from amanice.integrations.contracts.interfaces import Category, Product
from amanice.integrations.contracts.products import is_kids_pack, is_shoe_like, normalize_category
from amanice.utils.config_loader import ProjectorConfig

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER = "No products in this category yet."
SNEAKERS_LINK = ("Sneakers", "sneakers.html")
KIDS_PACKS_LINK = ("Kids Clothing Packs", "kids-packs.html")
# unreserved marks kept unescaped in query values
URI_COMPONENT_SAFE = "-_.!~*'()"

# category -> title fragments a legacy category card may carry
CARD_TITLE_MARKERS: Dict[str, tuple] = {
    Category.MEN.value: ("men's", "men", "male"),
    Category.WOMEN.value: ("women's", "women", "female"),
    Category.KIDS.value: ("kids", "kid"),
}
CARD_INDEX = {Category.MEN.value: 0, Category.WOMEN.value: 1, Category.KIDS.value: 2}


@dataclass
class NavLink:
    label: str
    href: str


@dataclass
class TypeGroup:
    type_name: str
    link: NavLink
    products: List[Product] = field(default_factory=list)


@dataclass
class GroupedView:
    category: str
    groups: List[TypeGroup] = field(default_factory=list)
    special_links: List[NavLink] = field(default_factory=list)
    placeholder: Optional[str] = None

    @property
    def links(self) -> List[NavLink]:
        return [g.link for g in self.groups] + self.special_links


@dataclass
class FeaturedItem:
    title: str
    image: str
    description: str
    price: str
    link: str


def type_link(type_name: str, category: str) -> str:
    return f"product-type.html?type={quote(type_name, safe=URI_COMPONENT_SAFE)}&category={category}"


def _category_matches(products: Iterable[Product], category: str, prefix_fallback: bool) -> List[Product]:
    if not category:
        return []
    products = list(products)
    exact = [p for p in products if normalize_category(p.category) == category]
    if exact or not prefix_fallback:
        return exact

    def prefix_match(p: Product) -> bool:
        product_category = normalize_category(p.category)
        if not product_category:
            return False
        return product_category.startswith(category) or category.startswith(product_category)

    matched = [p for p in products if prefix_match(p)]
    if matched:
        logger.info("No exact match for category '%s'; %d products matched by prefix", category, len(matched))
    return matched


def project(products: Iterable[Product], category: str, config: Optional[ProjectorConfig] = None) -> GroupedView:
    """Group a category's regular products by type and add the fixed links."""
    config = config or ProjectorConfig()
    category = normalize_category(category)

    groups: Dict[str, List[Product]] = {}
    for product in _category_matches(products, category, config.prefix_fallback):
        if is_shoe_like(product) or is_kids_pack(product):
            continue
        type_name = (product.type or "").strip()
        if not type_name:
            logger.warning("Product %s has no type, skipping", product.id)
            continue
        groups.setdefault(type_name, []).append(product)

    view = GroupedView(category=category)
    for type_name in sorted(groups, key=str.lower):
        view.groups.append(
            TypeGroup(type_name=type_name, link=NavLink(type_name, type_link(type_name, category)), products=groups[type_name])
        )
    if not view.groups:
        view.placeholder = EMPTY_PLACEHOLDER

    if category in (Category.MEN.value, Category.WOMEN.value):
        view.special_links.append(NavLink(*SNEAKERS_LINK))
    elif category == Category.KIDS.value:
        view.special_links.append(NavLink(*KIDS_PACKS_LINK))
    return view


def resolve_category_card(titles: List[str], category: str, config: Optional[ProjectorConfig] = None) -> Optional[int]:
    """
    Pick the index of the category card for `category` among card titles.

    Title matching keeps the last card whose lower-cased title contains one
    of the category's markers. When nothing matches, the index fallback
    assumes cards are ordered men, women, kids.
    """
    config = config or ProjectorConfig()
    category = normalize_category(category)
    markers = CARD_TITLE_MARKERS.get(category, (category,))

    found: Optional[int] = None
    if config.title_matching:
        for index, title in enumerate(titles):
            lowered = (title or "").lower()
            if any(marker in lowered for marker in markers):
                found = index
    if found is not None:
        return found

    if config.index_fallback:
        index = CARD_INDEX.get(category)
        if index is not None and len(titles) > index:
            logger.warning("Category card not found for '%s'; using card %d", category, index)
            return index
    return None


def _first(products: Iterable[Product], predicate) -> Optional[Product]:
    return next((p for p in products if predicate(p)), None)


def featured_items(products: Iterable[Product]) -> List[FeaturedItem]:
    """Men's sneakers, women's sneakers and kids packs tiles for the home page"""
    products = list(products)
    men = _first(products, lambda p: is_shoe_like(p) and p.category == Category.MEN.value)
    women = _first(products, lambda p: is_shoe_like(p) and p.category == Category.WOMEN.value)
    kids = _first(products, lambda p: is_kids_pack(p) and p.category == Category.KIDS.value)

    def tile(product: Optional[Product], title, image, description, price, link) -> FeaturedItem:
        if product is None:
            return FeaturedItem(title, image, description, price, link)
        return FeaturedItem(
            title,
            product.image or image,
            product.description or description,
            product.price_range or price,
            link,
        )

    return [
        tile(
            men,
            "Men's Sneakers",
            "Assets/images/Mens sneakers.jpg",
            "Stylish and comfortable sneakers for men in various sizes and styles.",
            "R100 - R790",
            "sneakers.html",
        ),
        tile(
            women,
            "Women's Sneakers",
            "Assets/images/Ladies takkies.jpg",
            "Trendy sneakers for women in all sizes and colors.",
            "R100 - R590",
            "sneakers.html",
        ),
        tile(
            kids,
            "Kids Clothing Packs",
            "Assets/images/Kids packs 1.jpg",
            "Complete outfits for children aged 0-14 years. "
            "Each pack contains 5-7 items depending on sizes and ages.",
            "R120",
            "kids-packs.html",
        ),
    ]


def _sort_key(product: Product) -> datetime:
    added = product.date_added
    if added.tzinfo is None:
        added = added.replace(tzinfo=timezone.utc)
    return added


def recently_added(products: Iterable[Product], limit: int = 6) -> List[Product]:
    """Newest admin-added products first"""
    recent = [p for p in products if p.date_added and not p.is_default]
    recent.sort(key=_sort_key, reverse=True)
    return recent[:limit]


def price_display(product: Product) -> str:
    if product.price_range:
        return product.price_range
    if product.price is not None:
        return f"R{product.price:.2f}"
    return "Price on request"


def stock_display(product: Product) -> str:
    return f"{product.total_stock} available"


def default_description(product: Product) -> str:
    return product.description or f"{product.category.capitalize()}'s {product.type}"
