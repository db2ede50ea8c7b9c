from __future__ import annotations

import logging

from flask import Blueprint, request, render_template, redirect, abort, url_for
from sqlalchemy.orm import joinedload, load_only

from models.book import Book
from models.book_instance import BookInstance
from models.repository import Repository
from models.schemas.book_instance import BookInstanceFormSchema, STATUS_VALUES
from utils.forms import load_form

bp = Blueprint("bookinstances", __name__)
logger = logging.getLogger(__name__)

instances = Repository(BookInstance)
books = Repository(Book)

form_schema = BookInstanceFormSchema()

# Each page keeps its own wording for a missing copy
DETAIL_NOT_FOUND = "Book copy not found"
DELETE_NOT_FOUND = "BookInstance not found"
UPDATE_NOT_FOUND = "Book instance not found"

WITH_BOOK = (joinedload(BookInstance.book),)


def book_choices():
    """Books (id and title) for the selection control, sorted by title."""
    return books.find_all_sorted(Book.title.asc(), options=(load_only(Book.title),))


def render_form(title: str, **context):
    return render_template(
        "bookinstance_form.html", title=title, book_list=book_choices(), status_list=STATUS_VALUES, **context
    )


@bp.get("/bookinstances")
def bookinstance_list():
    """
    List all book copies with their book
    ---
    tags: [Book instances]
    produces: [text/html]
    responses:
      200: { description: Book instance list page }
    """
    all_instances = instances.find_all_sorted(BookInstance.imprint.asc(), options=WITH_BOOK)
    return render_template("bookinstance_list.html", title="Book Instance List", bookinstance_list=all_instances)


@bp.get("/bookinstance/<instance_id>")
def bookinstance_detail(instance_id: str):
    """
    Show a book copy
    ---
    tags: [Book instances]
    produces: [text/html]
    parameters:
      - in: path
        name: instance_id
        type: string
        required: true
    responses:
      200: { description: Book instance detail page }
      404: { description: Book copy not found }
    """
    instance = instances.find_by_id(instance_id, options=WITH_BOOK)
    if instance is None:
        abort(404, description=DETAIL_NOT_FOUND)
    return render_template("bookinstance_detail.html", title="Book:", bookinstance=instance)


@bp.get("/bookinstance/create")
def bookinstance_create_get():
    """
    Empty book instance form
    ---
    tags: [Book instances]
    produces: [text/html]
    responses:
      200: { description: Book instance form with the list of books }
    """
    return render_form("Create Book Instance")


@bp.post("/bookinstance/create")
def bookinstance_create_post():
    """
    Create a book copy
    ---
    tags: [Book instances]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: formData
        name: book
        type: string
        required: true
      - in: formData
        name: imprint
        type: string
        required: true
      - in: formData
        name: status
        type: string
        enum: [Available, Maintenance, Loaned, Reserved]
      - in: formData
        name: due_back
        type: string
        format: date
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Created, redirect to the new book instance" }
    """
    data, errors = load_form(form_schema, request.form)
    if errors:
        return render_form(
            "Create Book Instance",
            bookinstance=data,
            selected_book=data.get("book_id"),
            errors=errors,
        )

    instance = instances.insert(BookInstance(**data))
    logger.info("Created book instance %s of book %s", instance.id, instance.book_id)
    return redirect(instance.url)


@bp.get("/bookinstance/<instance_id>/delete")
def bookinstance_delete_get(instance_id: str):
    """
    Book instance delete confirmation
    ---
    tags: [Book instances]
    produces: [text/html]
    parameters:
      - in: path
        name: instance_id
        type: string
        required: true
    responses:
      200: { description: Confirmation page }
      404: { description: Book instance not found }
    """
    instance = instances.find_by_id(instance_id, options=WITH_BOOK)
    if instance is None:
        abort(404, description=DELETE_NOT_FOUND)
    return render_template("bookinstance_delete.html", title="Delete Book Instance", bookinstance=instance)


@bp.post("/bookinstance/<instance_id>/delete")
def bookinstance_delete_post(instance_id: str):
    """
    Delete a book copy
    ---
    tags: [Book instances]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: instance_id
        type: string
        required: true
      - in: formData
        name: bookinstanceid
        type: string
        description: "Id of the copy to delete; defaults to the path id"
    responses:
      302: { description: Redirect to the book instance list }
    """
    target_id = request.form.get("bookinstanceid") or instance_id
    if instances.delete_by_id(target_id):
        logger.info("Deleted book instance %s", target_id)
    return redirect(url_for("bookinstances.bookinstance_list"))


@bp.get("/bookinstance/<instance_id>/update")
def bookinstance_update_get(instance_id: str):
    """
    Book instance form pre-filled for editing
    ---
    tags: [Book instances]
    produces: [text/html]
    parameters:
      - in: path
        name: instance_id
        type: string
        required: true
    responses:
      200: { description: Book instance form }
      404: { description: Book instance not found }
    """
    instance = instances.find_by_id(instance_id, options=WITH_BOOK)
    if instance is None:
        abort(404, description=UPDATE_NOT_FOUND)
    return render_form(
        "Update Book Instance",
        bookinstance=instance,
        selected_book=instance.book_id,
        default_book_title=instance.book.title,
    )


@bp.post("/bookinstance/<instance_id>/update")
def bookinstance_update_post(instance_id: str):
    """
    Update a book copy
    ---
    tags: [Book instances]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: instance_id
        type: string
        required: true
      - in: formData
        name: book
        type: string
        required: true
      - in: formData
        name: imprint
        type: string
        required: true
      - in: formData
        name: status
        type: string
        enum: [Available, Maintenance, Loaned, Reserved]
      - in: formData
        name: due_back
        type: string
        format: date
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Updated, redirect to the book instance" }
      404: { description: Book instance not found }
    """
    data, errors = load_form(form_schema, request.form)
    if errors:
        data["id"] = instance_id
        return render_form(
            "Update Book Instance",
            bookinstance=data,
            selected_book=data.get("book_id"),
            errors=errors,
        )

    instance = instances.update_by_id(instance_id, data)
    if instance is None:
        abort(404, description=UPDATE_NOT_FOUND)
    logger.info("Updated book instance %s", instance.id)
    return redirect(instance.url)
