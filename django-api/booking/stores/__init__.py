from booking.stores.interfaces import BookingStore, SessionStore, UnitOfWork, WalletStore

__all__ = ["BookingStore", "SessionStore", "UnitOfWork", "WalletStore"]
