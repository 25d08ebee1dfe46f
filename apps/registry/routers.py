from django.conf import settings


class RegistryRouter:
    """
    Route the registry app to the manufacturing registry database.

    Every other app falls through to the default routing.
    """

    app_label = 'registry'

    def db_for_read(self, model, **hints):
        if model._meta.app_label == self.app_label:
            return settings.REGISTRY_DATABASE_ALIAS
        return None

    def db_for_write(self, model, **hints):
        if model._meta.app_label == self.app_label:
            return settings.REGISTRY_DATABASE_ALIAS
        return None

    def allow_relation(self, obj1, obj2, **hints):
        labels = {obj1._meta.app_label, obj2._meta.app_label}
        if self.app_label in labels and len(labels) > 1:
            return False
        return None

    def allow_migrate(self, db, app_label, model_name=None, **hints):
        if app_label == self.app_label:
            return False
        if db == 'registry':
            return False
        return None
