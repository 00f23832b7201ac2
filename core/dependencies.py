from services.ledger_service import LedgerService
# Global service instance (will be set by main.py)
ledger_service = None

def get_ledger_service() -> LedgerService:
    """Returns the LedgerService instance owned by the running application."""
    if ledger_service is None:
        raise RuntimeError("Ledger service has not been initialized")
    return ledger_service

def set_services(ledger: LedgerService):
    """Set the global service instances."""
    global ledger_service
    ledger_service = ledger
