"""Stock administration: AddVariation, SetStockLevel."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.access.policy import require_any
from marketplace.access.roles import Caller
from marketplace.catalogue.article import Article
from marketplace.domain import logger, marketplace
from marketplace.stock.ledger import StockLedger
from marketplace.stock.record import StockRecord
from marketplace.stock.variation import Variation


@marketplace.command(part_of="Variation")
class AddVariation:
    article_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    color = String(max_length=100)
    size = String(max_length=50)
    price = Float(min_value=0.0, default=0.0)
    stock = Integer(min_value=0, default=0)


@marketplace.command(part_of="Variation")
class SetStockLevel:
    variation_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    stock = Integer(required=True, min_value=0)


@marketplace.command_handler(part_of=Variation)
class StockManagementHandler:
    @handle(AddVariation)
    def add_variation(self, command):
        caller = Caller.of(command)
        article = current_domain.repository_for(Article).get_article(command.article_id)
        require_any(caller, str(article.seller_id) == caller.user_id, action="add variations to this article")

        variation = Variation.add(
            article_id=str(article.id),
            seller_id=str(article.seller_id),
            stock=command.stock,
            color=command.color,
            size=command.size,
            price=command.price,
        )
        current_domain.repository_for(Variation).add(variation)
        current_domain.repository_for(StockRecord).add(
            StockRecord.track(str(variation.id), variation.stock, updated_by=caller.user_id)
        )

        logger.info("variation_added", variation_id=str(variation.id), article_id=str(article.id), stock=command.stock)
        return str(variation.id)

    @handle(SetStockLevel)
    def set_stock_level(self, command):
        caller = Caller.of(command)
        variation = current_domain.repository_for(Variation).get_variation(command.variation_id)
        require_any(caller, str(variation.seller_id) == caller.user_id, action="change this variation's stock")

        StockLedger.from_domain().set_level(str(variation.id), command.stock, set_by=caller.user_id)
        return str(variation.id)
