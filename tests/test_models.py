"""
Testes de mapeamento dos models.
"""

import pytest
from sqlalchemy import inspect

from library_portal.models.book import Book, Category
from library_portal.models.membership import MembershipPlan
from library_portal.models.profile import Profile


# Coleções "um para muitos" que nunca são lidas pela aplicação: acessá-las
# em uma sessão deve falhar em vez de devolver uma lista vazia.
UNREAD_COLLECTIONS = [
    (Category, "books"),
    (Book, "borrow_records"),
    (MembershipPlan, "members"),
    (Profile, "borrow_records"),
]


@pytest.mark.parametrize("model, attr", UNREAD_COLLECTIONS)
def test_unread_collections_raise_on_load(model, attr):
    relationship = inspect(model).relationships[attr]

    assert relationship.lazy == "raise"
    assert relationship.passive_deletes is True


def test_book_category_is_eager():
    assert inspect(Book).relationships["category"].lazy == "selectin"
