"""Catalog adapter backed by the marketplace's own Article and Variation repositories."""

from protean.utils.globals import current_domain

from marketplace.catalogue.article import Article
from marketplace.catalogue.lookup.port import CatalogEntry, CatalogPort
from marketplace.errors import VariationNotFound
from marketplace.stock.variation import Variation


class DomainCatalog(CatalogPort):
    def lookup(self, article_id: str, variation_id: str | None = None) -> CatalogEntry:
        article = current_domain.repository_for(Article).get_article(article_id)

        variation_price = None
        if variation_id:
            variation = current_domain.repository_for(Variation).get_variation(variation_id)
            if str(variation.article_id) != str(article.id):
                raise VariationNotFound(variation_id, f"Variation {variation_id} does not belong to article {article_id}")
            variation_price = variation.price

        return CatalogEntry(
            article_id=str(article.id),
            variation_id=str(variation_id) if variation_id else None,
            seller_id=str(article.seller_id),
            unit_price=article.unit_price(variation_price),
        )
