from innsync.models import hotel, restaurant, system  # noqa
