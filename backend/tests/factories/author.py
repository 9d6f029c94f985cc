"""Factory Boy definition for :class:`catalog.models.author.Author`."""

from __future__ import annotations

import factory

from catalog.models.author import Author
from tests.factories import BaseFactory


class AuthorFactory(BaseFactory):
    class Meta:
        model = Author

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    date_of_birth = factory.Faker("date_of_birth", minimum_age=25, maximum_age=90)
    country = factory.Faker("country_code")
