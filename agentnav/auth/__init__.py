from agentnav.auth.gate import AuthGate

__all__ = ["AuthGate"]
