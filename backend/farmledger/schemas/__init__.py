from farmledger.schemas.common import ActionResult, Shortage

__all__ = ["ActionResult", "Shortage"]
