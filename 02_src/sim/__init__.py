"""SIM module."""

from .sim import SCENARIO, ISim, Sim, build_whatsapp_payload

__all__ = ["Sim", "ISim", "SCENARIO", "build_whatsapp_payload"]
