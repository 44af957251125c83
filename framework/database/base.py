from abc import ABC, abstractmethod

class BaseDatabaseDriver(ABC):
    """Connection lifecycle every store driver exposes."""

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass

    @abstractmethod
    async def get_session(self):
        pass
