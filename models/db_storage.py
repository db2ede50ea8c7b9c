import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from os import getenv

from models.base_model import Base
from models.author import Author
from models.book import Book
from models.book_instance import BookInstance
from models.genre import Genre

logger = logging.getLogger(__name__)

# Map model names for easy querying
classes = {
    "Author": Author,
    "Book": Book,
    "BookInstance": BookInstance,
    "Genre": Genre,
}


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, url=None, echo=False):
        """Remember the database URL; the engine is built lazily by configure()/reload()"""
        self.__url = url
        self.__echo = echo

    def configure(self, url=None, echo=False):
        """(Re)create the engine for url, falling back to DATABASE_URL and a local SQLite file"""
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()

        url = url or self.__url or getenv("DATABASE_URL", "sqlite:///library.db")
        self.__url = url
        self.__echo = echo

        kwargs = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every checkout sees an empty database
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True

        self.__engine = create_engine(url, **kwargs)
        # Enable SQLite foreign keys (needed for ON DELETE RESTRICT/CASCADE)
        if self.__engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
        logger.debug("Storage engine configured for %s", self.__engine.url.render_as_string(hide_password=True))

    def reload(self):
        """Create tables and start session"""
        if self.__engine is None:
            self.configure(self.__url, self.__echo)
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        Session = scoped_session(session_factory)
        self.__session = Session

    def drop_all(self):
        """Drop every table (test teardown)"""
        if self.__session is not None:
            self.__session.remove()
        Base.metadata.drop_all(self.__engine)

    def all(self, cls=None):
        """Query objects"""
        obj_dict = {}
        if cls:
            objs = self.__session.query(cls).all()
        else:
            objs = []
            for model in classes.values():
                objs += self.__session.query(model).all()

        for obj in objs:
            obj_dict[f"{obj.__class__.__name__}.{obj.id}"] = obj
        return obj_dict

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def count(self, cls=None, *criteria):
        """Count objects, optionally filtered"""
        if cls:
            return self.__session.query(cls).filter(*criteria).count()
        total = 0
        for model in classes.values():
            total += self.__session.query(model).count()
        return total

    def close(self):
        """Remove session (for request teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
