"""Points wallet - balance, debit and credit for a user's points."""

import logging

from booking.domain import Points, Profile, UserId
from booking.stores.interfaces import WalletStore

logger = logging.getLogger(__name__)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError("Point amounts must be integers")
    if amount < 0:
        raise ValueError("Point amounts cannot be negative")


class PointsWallet:
    """Service over the wallet store."""

    def __init__(self, store: WalletStore) -> None:
        self._store = store

    def balance(self, user_id: UserId) -> int:
        wallet = self._store.get(user_id)
        return wallet.points.value if wallet else 0

    def lock(self, user_id: UserId) -> Profile:
        """Serialize concurrent writers on this user's wallet.

        Must be called inside a unit of work; the lock lasts until it ends.
        """
        return self._store.lock(user_id)

    def debit(self, user_id: UserId, amount: int) -> Profile:
        """Remove ``amount`` points.

        Raises:
            InsufficientBalanceError: If the balance is below ``amount``.
        """
        _check_amount(amount)
        if amount == 0:
            return self._store.get(user_id) or Profile(user_id=user_id, points=Points(0))
        return self._store.apply_delta(user_id, -amount)

    def credit(self, user_id: UserId, amount: int) -> Profile:
        _check_amount(amount)
        return self._store.apply_delta(user_id, amount)

    def adjust(self, user_id: UserId, delta: int) -> Profile:
        """Grant (positive) or remove (negative) points on an admin's behalf.

        Removals are rejected, not clamped, when the balance is too low.
        """
        if delta < 0:
            wallet = self.debit(user_id, -delta)
        else:
            wallet = self.credit(user_id, delta)
        logger.info("Adjusted points for user %s by %d (now %s)", user_id, delta, wallet.points)
        return wallet
