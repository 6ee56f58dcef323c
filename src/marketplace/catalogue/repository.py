"""Repository for the Article aggregate."""

from protean.exceptions import ObjectNotFoundError

from marketplace.catalogue.article import Article
from marketplace.domain import marketplace
from marketplace.errors import ArticleNotFound


@marketplace.repository(part_of=Article)
class ArticleRepository:
    def get_article(self, article_id) -> Article:
        try:
            return self.get(str(article_id))
        except ObjectNotFoundError:
            raise ArticleNotFound(article_id) from None

    def listed_by(self, seller_id) -> list[Article]:
        return self._dao.query.filter(seller_id=str(seller_id)).all().items
