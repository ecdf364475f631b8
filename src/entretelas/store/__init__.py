from .guardado_store import GuardadoStore
from .guardado_session import GuardadoSession
from .invoice_store import InvoiceStore
from .optimistic import OptimisticCollection

__all__ = ["GuardadoStore", "GuardadoSession", "InvoiceStore", "OptimisticCollection"]
