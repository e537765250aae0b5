"""Factory Boy fixtures for students app tests."""

import factory

from students.models import StudentRegistration


class StudentRegistrationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = StudentRegistration

    name = factory.Sequence(lambda n: f"Student {n}")
    email = factory.Sequence(lambda n: f"student{n}@example.com")
    phone = factory.Sequence(lambda n: f"09{n:08d}")
    major = "Computer Science"
    ip_address = "10.0.0.1"
