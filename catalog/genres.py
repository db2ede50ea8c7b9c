from __future__ import annotations

import logging

from flask import Blueprint, request, render_template, redirect, abort, url_for
from sqlalchemy.orm import load_only

from models.book import Book
from models.genre import Genre
from models.repository import Repository
from models.schemas.genre import GenreCreateSchema, GenreUpdateSchema
from utils.forms import load_form

bp = Blueprint("genres", __name__)
logger = logging.getLogger(__name__)

genres = Repository(Genre)
books = Repository(Book)

create_schema = GenreCreateSchema()
update_schema = GenreUpdateSchema()


def books_in_genre(genre_id: str, *columns):
    options = (load_only(*columns),) if columns else ()
    return books.find_by_filter(Book.genres.any(Genre.id == genre_id), order_by=(Book.title.asc(),), options=options)


@bp.get("/genres")
def genre_list():
    """
    List all genres, sorted by name
    ---
    tags: [Genres]
    produces: [text/html]
    responses:
      200: { description: Genre list page }
    """
    all_genres = genres.find_all_sorted(Genre.name.asc())
    return render_template("genre_list.html", title="Genre List", genre_list=all_genres)


@bp.get("/genre/<genre_id>")
def genre_detail(genre_id: str):
    """
    Show a genre and the books in it
    ---
    tags: [Genres]
    produces: [text/html]
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
    responses:
      200: { description: Genre detail page }
      404: { description: Genre not found }
    """
    genre = genres.find_by_id(genre_id)
    genre_books = books_in_genre(genre_id, Book.title, Book.summary)
    if genre is None:
        abort(404, description="Genre not found")
    return render_template("genre_detail.html", title="Genre Detail", genre=genre, genre_books=genre_books)


@bp.get("/genre/create")
def genre_create_get():
    """
    Empty genre form
    ---
    tags: [Genres]
    produces: [text/html]
    responses:
      200: { description: Genre form }
    """
    return render_template("genre_form.html", title="Create Genre")


@bp.post("/genre/create")
def genre_create_post():
    """
    Create a genre
    ---
    tags: [Genres]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: formData
        name: name
        type: string
        required: true
        description: "At least 3 characters after trimming"
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: Redirect to the new (or already existing) genre }
    """
    data, errors = load_form(create_schema, request.form)
    if errors:
        return render_template("genre_form.html", title="Create Genre", genre=data, errors=errors)

    # Same name already stored: send the user there instead of inserting a duplicate
    existing = genres.find_one(Genre.name == data["name"])
    if existing is not None:
        return redirect(existing.url)

    genre = genres.insert(Genre(name=data["name"]))
    logger.info("Created genre %s (%s)", genre.id, genre.name)
    return redirect(genre.url)


@bp.get("/genre/<genre_id>/delete")
def genre_delete_get(genre_id: str):
    """
    Genre delete confirmation
    ---
    tags: [Genres]
    produces: [text/html]
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
    responses:
      200: { description: Confirmation page listing books that use the genre }
      302: { description: "Genre not found, redirect to the genre list" }
    """
    genre = genres.find_by_id(genre_id)
    books_using_genre = books_in_genre(genre_id, Book.title)
    if genre is None:
        return redirect(url_for("genres.genre_list"))
    return render_template(
        "genre_delete.html", title="Delete Genre", genre=genre, books_using_genre=books_using_genre
    )


@bp.post("/genre/<genre_id>/delete")
def genre_delete_post(genre_id: str):
    """
    Delete a genre that no book uses
    ---
    tags: [Genres]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
      - in: formData
        name: genreid
        type: string
        description: "Id of the genre to delete; defaults to the path id"
    responses:
      200: { description: "Genre still in use, confirmation page re-rendered" }
      302: { description: "Deleted, redirect to the genre list" }
    """
    # The body id names the genre to delete, so the in-use check runs against it
    target_id = request.form.get("genreid") or genre_id
    genre = genres.find_by_id(target_id)
    books_using_genre = books_in_genre(target_id)
    if books_using_genre:
        return render_template(
            "genre_delete.html", title="Delete Genre", genre=genre, books_using_genre=books_using_genre
        )

    if genres.delete_by_id(target_id):
        logger.info("Deleted genre %s", target_id)
    return redirect(url_for("genres.genre_list"))


@bp.get("/genre/<genre_id>/update")
def genre_update_get(genre_id: str):
    """
    Genre form pre-filled for editing
    ---
    tags: [Genres]
    produces: [text/html]
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
    responses:
      200: { description: Genre form }
      404: { description: Genre not found }
    """
    genre = genres.find_by_id(genre_id)
    if genre is None:
        abort(404, description="Genre not found")
    return render_template("genre_form.html", title="Update Genre", genre=genre)


@bp.post("/genre/<genre_id>/update")
def genre_update_post(genre_id: str):
    """
    Update a genre
    ---
    tags: [Genres]
    consumes: [application/x-www-form-urlencoded, multipart/form-data]
    produces: [text/html]
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
      - in: formData
        name: name
        type: string
        required: true
    responses:
      200: { description: Form re-rendered with validation errors }
      302: { description: "Updated, redirect to the genre" }
      404: { description: Genre not found }
    """
    data, errors = load_form(update_schema, request.form)
    if errors:
        # The path id is authoritative for which genre is being edited
        data["id"] = genre_id
        return render_template("genre_form.html", title="Update Genre", genre=data, errors=errors)

    genre = genres.update_by_id(genre_id, {"name": data["name"]})
    if genre is None:
        abort(404, description="Genre not found")
    logger.info("Updated genre %s", genre.id)
    return redirect(genre.url)
