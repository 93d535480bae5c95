from abc import ABC, abstractmethod

from src.libs.result import Result


class IEmailSender(ABC):
    """Outbound email interface - application layer"""

    @abstractmethod
    async def send(self, to_address: str, subject: str, body: str) -> Result[None]:
        """Send a plain-text email, returning Error DELIVERY_ERROR on failure"""
        pass
