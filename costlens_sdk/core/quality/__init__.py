from .detector import QualityDetector

__all__ = ["QualityDetector"]
