"""MongoDB implementation of UserRepository."""

from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import IndexSpec, ensure_index
from domain.model.errors import DuplicateEmailError, RepositoryError
from domain.model.user import AUTH_ACCESS, SessionToken, User

logger = getLogger(__name__)

USER_INDEXES = (
    IndexSpec('idx_users_email', (('email', 1),), unique=True),
    IndexSpec('idx_users_tokens', (('tokens.token', 1),)),
)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        try:
            return all(ensure_index(self.collection, spec) for spec in USER_INDEXES)
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            tokens=[
                SessionToken(token=t['token'], access=t.get('access', AUTH_ACCESS))
                for t in doc.get('tokens', [])
            ],
        )

    def _to_document(self, user: User) -> dict:
        return {
            '_id': user.id,
            'email': user.email,
            'password_hash': user.password_hash,
            'tokens': [{'access': t.access, 'token': t.token} for t in user.tokens],
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }

    def create(self, user: User) -> User:
        """Insert the user; the unique email index rejects a second writer."""
        try:
            self.collection.insert_one(self._to_document(user))
        except DuplicateKeyError as e:
            logger.warning("User creation failed: email already exists", extra={"email": user.email})
            raise DuplicateEmailError(user.email) from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": user.email, "error": str(e)})
            raise RepositoryError("Failed to create user") from e
        logger.info("User created", extra={"userId": user.id})
        return user

    def get_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email}, "Failed to get user by email")

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id}, "Failed to get user by ID")

    def get_by_token(self, user_id: str, token: str) -> User | None:
        query = {
            '_id': user_id,
            'tokens': {'$elemMatch': {'token': token, 'access': AUTH_ACCESS}},
        }
        return self._find_one(query, "Failed to get user by token")

    def add_token(self, user_id: str, token: str) -> bool:
        update = {
            '$push': {'tokens': {'access': AUTH_ACCESS, 'token': token}},
            '$set': {'updated_at': datetime.now(timezone.utc)},
        }
        return self._update_one(user_id, update, "Failed to add token").matched_count > 0

    def remove_token(self, user_id: str, token: str) -> bool:
        update = {
            '$pull': {'tokens': {'token': token}},
            '$set': {'updated_at': datetime.now(timezone.utc)},
        }
        return self._update_one(user_id, update, "Failed to remove token").modified_count > 0

    def _find_one(self, query: dict, failure: str) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error(failure, extra={"error": str(e)})
            raise RepositoryError(failure) from e
        return self._to_domain(doc) if doc else None

    def _update_one(self, user_id: str, update: dict, failure: str):
        try:
            return self.collection.update_one({'_id': user_id}, update)
        except PyMongoError as e:
            logger.error(failure, extra={"userId": user_id, "error": str(e)})
            raise RepositoryError(failure) from e
