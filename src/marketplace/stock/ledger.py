"""Stock ledger: the only way stock moves.

Every change updates the variation and its stock record together and saves
both. Saves go through the aggregate version check, so two requests that
loaded the same variation cannot both decrement it. The loser gets
``ConcurrentModification`` and retries the whole operation.
"""

from collections.abc import Mapping

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from marketplace.domain import logger
from marketplace.errors import ConcurrentModification, InsufficientStock, StockOutOfSync
from marketplace.stock.record import StockMovement, StockRecord
from marketplace.stock.variation import Variation


class StockLedger:
    def __init__(self, variations, records):
        self._variations = variations
        self._records = records

    @classmethod
    def from_domain(cls) -> "StockLedger":
        return cls(
            current_domain.repository_for(Variation),
            current_domain.repository_for(StockRecord),
        )

    # -------------------------------------------------------------------
    # Single-variation operations
    # -------------------------------------------------------------------
    def available(self, variation_id) -> int:
        variation, _ = self._load(variation_id)
        return variation.stock

    def reserve(self, variation_id, quantity: int, order_id=None) -> int:
        """Take ``quantity`` units out of stock. Returns the remaining stock."""
        variation, record = self._load(variation_id)
        self._reserve_loaded(variation, record, quantity, order_id)
        self._save(variation, record)
        return variation.stock

    def release(self, variation_id, quantity: int, order_id=None) -> int:
        """Put ``quantity`` units back into stock. Returns the new stock."""
        variation, record = self._load(variation_id)
        self._release_loaded(variation, record, quantity, order_id)
        self._save(variation, record)
        return variation.stock

    def set_level(self, variation_id, quantity: int, set_by=None) -> int:
        """Overwrite the stock of a variation, repairing its record if needed."""
        variation, record = self._load(variation_id, strict=False)
        variation.set_level(quantity, set_by=set_by)
        record.mirror(variation.stock, StockMovement.ADJUSTMENT, updated_by=set_by)
        self._save(variation, record)

        logger.info("stock_level_set", variation_id=str(variation.id), stock=quantity, set_by=set_by)
        return variation.stock

    # -------------------------------------------------------------------
    # Order-wide operations
    # -------------------------------------------------------------------
    def reserve_all(self, demands: Mapping[str, int], order_id=None) -> None:
        """Reserve every variation of an order, or none of them.

        All quantities are checked before anything is decremented. If a save
        still fails midway, the variations already saved are put back before
        the error propagates.
        """
        loaded = {variation_id: self._load(variation_id) for variation_id in demands}

        for variation_id, quantity in demands.items():
            variation, _ = loaded[variation_id]
            if variation.stock < quantity:
                raise InsufficientStock(variation_id, requested=quantity, available=variation.stock)

        for variation_id, quantity in demands.items():
            self._reserve_loaded(*loaded[variation_id], quantity, order_id)

        saved = []
        try:
            for variation_id in demands:
                self._save(*loaded[variation_id])
                saved.append(variation_id)
        except Exception:
            logger.warning("reservation_rolled_back", order_id=order_id, variations=saved)
            for variation_id in saved:
                variation, record = loaded[variation_id]
                self._release_loaded(variation, record, demands[variation_id], order_id)
                self._save(variation, record)
            raise

    def release_all(self, demands: Mapping[str, int], order_id=None) -> None:
        for variation_id, quantity in demands.items():
            self.release(variation_id, quantity, order_id)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _load(self, variation_id, strict: bool = True) -> tuple[Variation, StockRecord]:
        variation, record = self._read(variation_id)
        if not strict or record.quantity == variation.stock:
            return variation, record

        # The two reads may straddle another request's commit
        variation, record = self._read(variation_id)
        if record.quantity == variation.stock:
            return variation, record

        if record.quantity - (record.last_change or 0) == variation.stock:
            logger.info(
                "stock_read_raced",
                variation_id=str(variation.id),
                variation_stock=variation.stock,
                record_quantity=record.quantity,
            )
            raise ConcurrentModification(
                f"Variation {variation.id} was changed by another request",
                variation_id=str(variation.id),
            )

        logger.error(
            "stock_out_of_sync",
            variation_id=str(variation.id),
            variation_stock=variation.stock,
            record_quantity=record.quantity,
        )
        raise StockOutOfSync(
            f"Stock of variation {variation.id} disagrees with its stock record",
            variation_id=str(variation.id),
            variation_stock=variation.stock,
            record_quantity=record.quantity,
        )

    def _read(self, variation_id) -> tuple[Variation, StockRecord]:
        variation = self._variations.get_variation(variation_id)
        record = self._records.for_variation(variation.id)
        if record is None:
            logger.warning("stock_record_missing", variation_id=str(variation.id))
            record = StockRecord.track(str(variation.id), variation.stock)
        return variation, record

    def _reserve_loaded(self, variation, record, quantity, order_id):
        variation.reserve(quantity, order_id=order_id)
        record.mirror(variation.stock, StockMovement.RESERVATION)
        logger.info("stock_reserved", variation_id=str(variation.id), quantity=quantity, order_id=order_id)

    def _release_loaded(self, variation, record, quantity, order_id):
        variation.release(quantity, order_id=order_id)
        record.mirror(variation.stock, StockMovement.RELEASE)
        logger.info("stock_released", variation_id=str(variation.id), quantity=quantity, order_id=order_id)

    def _save(self, variation, record):
        try:
            self._variations.add(variation)
        except ExpectedVersionError as exc:
            raise ConcurrentModification(
                f"Variation {variation.id} was changed by another request",
                variation_id=str(variation.id),
            ) from exc
        self._records.add(record)
