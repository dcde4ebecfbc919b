"""Catalog resolution shared by the cart and order handlers.

A product is only sellable when the whole chain product → artwork → artist
resolves. Handlers differ in what a broken chain means: the cart and order
creation reject it, while confirmation skips the affected line.
"""

from dataclasses import dataclass

from ordering.exceptions import NotFoundError
from ordering.storage.port import (
    ArtistRecord,
    ArtworkRecord,
    CatalogStore,
    ProductRecord,
    ProductTypeRecord,
)


@dataclass(frozen=True)
class ProductChain:
    product: ProductRecord
    artwork: ArtworkRecord
    artist: ArtistRecord


def resolve_product_chain(catalog: CatalogStore, product_id) -> ProductChain:
    """Resolve product, artwork and artist, failing at the first missing link."""
    product = catalog.get_product(str(product_id))
    if product is None:
        raise NotFoundError("product", product_id)

    artwork = catalog.get_artwork(product.artwork_id)
    if artwork is None:
        raise NotFoundError("artwork", product.artwork_id, f"Artwork for product {product_id} not found")

    artist = catalog.get_artist(artwork.artist_id)
    if artist is None:
        raise NotFoundError("artist", artwork.artist_id, f"Artist for artwork {artwork.id} not found")

    return ProductChain(product=product, artwork=artwork, artist=artist)


def find_product_chain(catalog: CatalogStore, product_id) -> ProductChain | None:
    """Like resolve_product_chain(), but returns None when any link is missing."""
    try:
        return resolve_product_chain(catalog, product_id)
    except NotFoundError:
        return None


def find_product_type(catalog: CatalogStore, product_type_id) -> ProductTypeRecord | None:
    return next(
        (product_type for product_type in catalog.get_product_types() if product_type.id == product_type_id),
        None,
    )
