from __future__ import annotations

import logging

from flask import Blueprint, request, render_template, redirect, abort, url_for
from sqlalchemy.orm import load_only

from models.author import Author
from models.book import Book
from models.repository import Repository
from models.schemas.author import AuthorFormSchema
from utils.forms import load_form

bp = Blueprint("authors", __name__)
logger = logging.getLogger(__name__)

authors = Repository(Author)
books = Repository(Book)

form_schema = AuthorFormSchema()


def books_by(author_id: str):
    return books.find_by_filter(
        Book.author_id == author_id,
        order_by=(Book.title.asc(),),
        options=(load_only(Book.title, Book.summary),),
    )


@bp.get("/authors")
def author_list():
    """
    List all authors, sorted by family name
    ---
    tags: [Authors]
    produces: [text/html]
    responses:
      200: { description: Author list page }
    """
    all_authors = authors.find_all_sorted(Author.family_name.asc(), Author.first_name.asc())
    return render_template("author_list.html", title="Author List", author_list=all_authors)


@bp.get("/author/<author_id>")
def author_detail(author_id: str):
    """
    Show an author and their books
    ---
    tags: [Authors]
    produces: [text/html]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: Author detail page }
      404: { description: Author not found }
    """
    author = authors.find_by_id(author_id)
    author_books = books_by(author_id)
    if author is None:
        abort(404, description="Author not found")
    return render_template("author_detail.html", title="Author Detail", author=author, author_books=author_books)


@bp.get("/author/create")
def author_create_get():
    """
    Empty author form
    ---
    tags: [Authors]
    produces: [text/html]
    responses:
      200: { description: Author form }
    """
    return render_template("author_form.html", title="Create Author")


@bp.post("/author/create")
def author_create_post():
    """
    Create an author
    ---
    tags: [Authors]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: formData
        name: first_name
        type: string
        required: true
      - in: formData
        name: family_name
        type: string
        required: true
      - in: formData
        name: date_of_birth
        type: string
        format: date
      - in: formData
        name: date_of_death
        type: string
        format: date
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Created, redirect to the new author" }
    """
    data, errors = load_form(form_schema, request.form)
    if errors:
        return render_template("author_form.html", title="Create Author", author=data, errors=errors)

    author = authors.insert(Author(**data))
    logger.info("Created author %s (%s)", author.id, author.name)
    return redirect(author.url)


@bp.get("/author/<author_id>/delete")
def author_delete_get(author_id: str):
    """
    Author delete confirmation
    ---
    tags: [Authors]
    produces: [text/html]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: Confirmation page listing the author's books }
      302: { description: "Author not found, redirect to the author list" }
    """
    author = authors.find_by_id(author_id)
    author_books = books_by(author_id)
    if author is None:
        return redirect(url_for("authors.author_list"))
    return render_template("author_delete.html", title="Delete Author", author=author, author_books=author_books)


@bp.post("/author/<author_id>/delete")
def author_delete_post(author_id: str):
    """
    Delete an author with no books
    ---
    tags: [Authors]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: formData
        name: authorid
        type: string
        description: "Id of the author to delete; defaults to the path id"
    responses:
      200: { description: "Author still has books, confirmation page re-rendered" }
      302: { description: "Deleted, redirect to the author list" }
    """
    target_id = request.form.get("authorid") or author_id
    author = authors.find_by_id(target_id)
    author_books = books_by(target_id)
    if author_books:
        return render_template("author_delete.html", title="Delete Author", author=author, author_books=author_books)

    if authors.delete_by_id(target_id):
        logger.info("Deleted author %s", target_id)
    return redirect(url_for("authors.author_list"))


@bp.get("/author/<author_id>/update")
def author_update_get(author_id: str):
    """
    Author form pre-filled for editing
    ---
    tags: [Authors]
    produces: [text/html]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: Author form }
      404: { description: Author not found }
    """
    author = authors.find_by_id(author_id)
    if author is None:
        abort(404, description="Author not found")
    return render_template("author_form.html", title="Update Author", author=author)


@bp.post("/author/<author_id>/update")
def author_update_post(author_id: str):
    """
    Update an author
    ---
    tags: [Authors]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: formData
        name: first_name
        type: string
        required: true
      - in: formData
        name: family_name
        type: string
        required: true
      - in: formData
        name: date_of_birth
        type: string
        format: date
      - in: formData
        name: date_of_death
        type: string
        format: date
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Updated, redirect to the author" }
      404: { description: Author not found }
    """
    data, errors = load_form(form_schema, request.form)
    if errors:
        data["id"] = author_id
        return render_template("author_form.html", title="Update Author", author=data, errors=errors)

    author = authors.update_by_id(author_id, data)
    if author is None:
        abort(404, description="Author not found")
    logger.info("Updated author %s", author.id)
    return redirect(author.url)
