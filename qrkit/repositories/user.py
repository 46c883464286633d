from qrkit.domain.user import User
from qrkit.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
