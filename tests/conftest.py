import pytest
from flask import template_rendered

from catalog import create_app
from models import storage
from models.author import Author
from models.book import Book
from models.book_instance import BookInstance
from models.genre import Genre


@pytest.fixture
def app():
    """Isolated app over a fresh in-memory database"""
    app = create_app("testing")
    yield app
    storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Session of the running app, for arranging and checking records"""
    with app.app_context():
        yield storage.get_session()


@pytest.fixture
def captured_templates(app):
    """Records (template name, context) for every render during the test"""
    recorded = []

    def record(sender, template, context, **extra):
        recorded.append((template.name, context))

    template_rendered.connect(record, app)
    try:
        yield recorded
    finally:
        template_rendered.disconnect(record, app)


@pytest.fixture
def author(db):
    a = Author(first_name="Patrick", family_name="Rothfuss")
    a.save()
    return a


@pytest.fixture
def genre(db):
    g = Genre(name="Fantasy")
    g.save()
    return g


@pytest.fixture
def book(db, author, genre):
    b = Book(
        title="The Name of the Wind",
        summary="A young man grows to be the most notorious magician.",
        isbn="9781473211896",
        author_id=author.id,
    )
    b.genres = [genre]
    b.save()
    return b


@pytest.fixture
def book_instance(db, book):
    i = BookInstance(book_id=book.id, imprint="Gollancz, 2011.", status="Loaned")
    i.save()
    return i
