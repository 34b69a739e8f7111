"""Factory for Users"""
from factory import Faker
from factory.django import DjangoModelFactory
from factory.fuzzy import FuzzyText

from users.models import User


class UserFactory(DjangoModelFactory):
    """Factory for Users"""

    username = FuzzyText()
    email = FuzzyText(suffix="@example.com")
    name = Faker("name")
    password = FuzzyText(length=8)

    is_active = True

    class Meta:
        model = User
