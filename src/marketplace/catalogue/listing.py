"""Article listing commands: RegisterArticle, ChangeArticlePromotion."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.policy import require_any, require_role
from marketplace.access.roles import Caller, Role
from marketplace.catalogue.article import Article
from marketplace.domain import logger, marketplace


@marketplace.command(part_of="Article")
class RegisterArticle:
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    promotion_price = Float(min_value=0.0)
    on_promotion = Boolean(default=False)
    seller_id = Identifier()  # Administrators list on behalf of a seller


@marketplace.command(part_of="Article")
class ChangeArticlePromotion:
    article_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    on_promotion = Boolean(required=True)
    promotion_price = Float(min_value=0.0)


@marketplace.command_handler(part_of=Article)
class ArticleListingHandler:
    @handle(RegisterArticle)
    def register_article(self, command):
        caller = Caller.of(command)
        require_role(caller, Role.SELLER, Role.ADMINISTRATOR, action="list articles")

        if caller.is_admin:
            if not command.seller_id:
                raise ValidationError({"seller_id": ["Administrators must name the seller"]})
            seller_id = str(command.seller_id)
        else:
            seller_id = caller.user_id

        article = Article.register(
            seller_id=seller_id,
            title=command.title,
            price=command.price,
            promotion_price=command.promotion_price,
            on_promotion=command.on_promotion,
        )
        current_domain.repository_for(Article).add(article)

        logger.info("article_registered", article_id=str(article.id), seller_id=seller_id)
        return str(article.id)

    @handle(ChangeArticlePromotion)
    def change_promotion(self, command):
        caller = Caller.of(command)
        repo = current_domain.repository_for(Article)
        article = repo.get_article(command.article_id)
        require_any(caller, str(article.seller_id) == caller.user_id, action="change this article's promotion")

        article.change_promotion(command.on_promotion, command.promotion_price)
        repo.add(article)
        return str(article.id)
