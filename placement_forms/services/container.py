"""
Service container.

Built once at startup from the database handle and kept on app.state;
routes receive it through api.dependencies.get_services. Tests build
one from in-memory repositories instead.
"""

from placement_forms.core.config import Settings, get_settings
from placement_forms.services.export_service import ExportService
from placement_forms.services.form_service import FormTemplateService, RespondentFormService
from placement_forms.services.mongo_service import get_mongo_services
from placement_forms.services.submission_service import SubmissionService


class ServiceContainer:

    def __init__(self, templates, responses, profiles, storage=None, settings: Settings = None):
        self.settings = settings or get_settings()
        self.templates = templates
        self.responses = responses
        self.profiles = profiles
        self.storage = storage

        self.forms = FormTemplateService(templates, responses, profiles, self.settings)
        self.respondent = RespondentFormService(templates, responses, profiles)
        self.submissions = SubmissionService(templates, responses, profiles, self.settings)
        self.exports = ExportService(self.forms, responses, profiles)

    @classmethod
    def from_database(cls, db, storage=None, settings: Settings = None) -> "ServiceContainer":
        repos = get_mongo_services(db)
        return cls(repos["templates"], repos["responses"], repos["profiles"], storage, settings)
