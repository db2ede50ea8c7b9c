from __future__ import annotations

import logging

from flask import Blueprint, request, render_template, redirect, abort, url_for
from sqlalchemy.orm import joinedload, selectinload

from models.author import Author
from models.book import Book
from models.book_instance import BookInstance, BookInstanceStatus
from models.genre import Genre
from models.repository import Repository
from models.schemas.book import BookFormSchema
from utils.forms import load_form

bp = Blueprint("books", __name__)
logger = logging.getLogger(__name__)

books = Repository(Book)
authors = Repository(Author)
genres = Repository(Genre)
instances = Repository(BookInstance)

form_schema = BookFormSchema()

WITH_AUTHOR_AND_GENRES = (joinedload(Book.author), selectinload(Book.genres))


def render_form(title: str, selected_genres=(), **context):
    all_authors = authors.find_all_sorted(Author.family_name.asc(), Author.first_name.asc())
    all_genres = genres.find_all_sorted(Genre.name.asc())
    return render_template(
        "book_form.html",
        title=title,
        authors=all_authors,
        genres=all_genres,
        selected_genres=set(selected_genres),
        **context,
    )


def copies_of(book_id: str):
    return instances.find_by_filter(BookInstance.book_id == book_id, order_by=(BookInstance.imprint.asc(),))


def resolve_genres(genre_ids):
    if not genre_ids:
        return []
    return genres.find_by_filter(Genre.id.in_(genre_ids))


@bp.get("/")
def index():
    """
    Catalog home page with record counts
    ---
    tags: [Catalog]
    produces: [text/html]
    responses:
      200: { description: Site home page }
    """
    counts = {
        "book_count": books.count(),
        "book_instance_count": instances.count(),
        "book_instance_available_count": instances.count(BookInstance.status == BookInstanceStatus.AVAILABLE),
        "author_count": authors.count(),
        "genre_count": genres.count(),
    }
    return render_template("index.html", title="Local Library Home", **counts)


@bp.get("/books")
def book_list():
    """
    List all books with their author
    ---
    tags: [Books]
    produces: [text/html]
    responses:
      200: { description: Book list page }
    """
    all_books = books.find_all_sorted(Book.title.asc(), options=(joinedload(Book.author),))
    return render_template("book_list.html", title="Book List", book_list=all_books)


@bp.get("/book/<book_id>")
def book_detail(book_id: str):
    """
    Show a book, its genres and its copies
    ---
    tags: [Books]
    produces: [text/html]
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200: { description: Book detail page }
      404: { description: Book not found }
    """
    book = books.find_by_id(book_id, options=WITH_AUTHOR_AND_GENRES)
    book_instances = copies_of(book_id)
    if book is None:
        abort(404, description="Book not found")
    return render_template("book_detail.html", title=book.title, book=book, book_instances=book_instances)


@bp.get("/book/create")
def book_create_get():
    """
    Empty book form
    ---
    tags: [Books]
    produces: [text/html]
    responses:
      200: { description: Book form with authors and genres }
    """
    return render_form("Create Book")


@bp.post("/book/create")
def book_create_post():
    """
    Create a book
    ---
    tags: [Books]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: formData
        name: title
        type: string
        required: true
      - in: formData
        name: author
        type: string
        required: true
      - in: formData
        name: summary
        type: string
        required: true
      - in: formData
        name: isbn
        type: string
        required: true
      - in: formData
        name: genre
        type: array
        items: { type: string }
        collectionFormat: multi
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Created, redirect to the new book" }
    """
    data, errors = load_form(form_schema, request.form)
    if errors:
        return render_form("Create Book", selected_genres=data.get("genre_ids", []), book=data, errors=errors)

    genre_ids = data.pop("genre_ids")
    book = Book(**data)
    book.genres = resolve_genres(genre_ids)
    books.insert(book)
    logger.info("Created book %s (%s)", book.id, book.title)
    return redirect(book.url)


@bp.get("/book/<book_id>/delete")
def book_delete_get(book_id: str):
    """
    Book delete confirmation
    ---
    tags: [Books]
    produces: [text/html]
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200: { description: Confirmation page listing copies of the book }
      302: { description: "Book not found, redirect to the book list" }
    """
    book = books.find_by_id(book_id, options=WITH_AUTHOR_AND_GENRES)
    book_instances = copies_of(book_id)
    if book is None:
        return redirect(url_for("books.book_list"))
    return render_template("book_delete.html", title="Delete Book", book=book, book_instances=book_instances)


@bp.post("/book/<book_id>/delete")
def book_delete_post(book_id: str):
    """
    Delete a book that has no copies
    ---
    tags: [Books]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
      - in: formData
        name: bookid
        type: string
        description: "Id of the book to delete; defaults to the path id"
    responses:
      200: { description: "Book still has copies, confirmation page re-rendered" }
      302: { description: "Deleted, redirect to the book list" }
    """
    target_id = request.form.get("bookid") or book_id
    book = books.find_by_id(target_id, options=WITH_AUTHOR_AND_GENRES)
    book_instances = copies_of(target_id)
    if book_instances:
        return render_template("book_delete.html", title="Delete Book", book=book, book_instances=book_instances)

    if books.delete_by_id(target_id):
        logger.info("Deleted book %s", target_id)
    return redirect(url_for("books.book_list"))


@bp.get("/book/<book_id>/update")
def book_update_get(book_id: str):
    """
    Book form pre-filled for editing
    ---
    tags: [Books]
    produces: [text/html]
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200: { description: Book form }
      404: { description: Book not found }
    """
    book = books.find_by_id(book_id, options=WITH_AUTHOR_AND_GENRES)
    if book is None:
        abort(404, description="Book not found")
    return render_form("Update Book", selected_genres=[g.id for g in book.genres], book=book)


@bp.post("/book/<book_id>/update")
def book_update_post(book_id: str):
    """
    Update a book
    ---
    tags: [Books]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
      - in: formData
        name: title
        type: string
        required: true
      - in: formData
        name: author
        type: string
        required: true
      - in: formData
        name: summary
        type: string
        required: true
      - in: formData
        name: isbn
        type: string
        required: true
      - in: formData
        name: genre
        type: array
        items: { type: string }
        collectionFormat: multi
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Updated, redirect to the book" }
      404: { description: Book not found }
    """
    data, errors = load_form(form_schema, request.form)
    if errors:
        data["id"] = book_id
        return render_form("Update Book", selected_genres=data.get("genre_ids", []), book=data, errors=errors)

    data["genres"] = resolve_genres(data.pop("genre_ids"))
    book = books.update_by_id(book_id, data)
    if book is None:
        abort(404, description="Book not found")
    logger.info("Updated book %s", book.id)
    return redirect(book.url)
