"""Repository for the subject catalog.

A saved custom catalog replaces the built-in defaults entirely.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from medstride.models import Subject
from medstride.repositories.kv_store import KeyValueStore, get_store

logger = logging.getLogger(__name__)

SUBJECTS_KEY = "custom-subjects"

_subjects_adapter = TypeAdapter(list[Subject])

DEFAULT_SUBJECTS: list[Subject] = [
    Subject(id="pisco-ii", name="PISCO II (Programa de Interação Serviço, Saúde e Comunidade) - REDE", shortName="PISCO II", color="medical-primary", icon="🏥"),
    Subject(id="ingles-medico", name="INGLÊS MÉDICO", shortName="Inglês Médico", color="medical-info", icon="🌍"),
    Subject(id="libras", name="LÍNGUA BRASILEIRA DE SINAIS - LIBRAS", shortName="LIBRAS", color="medical-accent", icon="👋"),
    Subject(id="tutorial-ii-tbl", name="TUTORIAL II TBL: Funções Orgânicas/Mecanismos de Agressão e Defesa/Regulação e Excreção", shortName="Tutorial II TBL", color="medical-secondary", icon="🧬"),
    Subject(id="habilidades-psicologia", name="HABILIDADES MÉDICAS II SR-PSICOLOGIA", shortName="Habilidades - Psicologia", color="medical-warning", icon="🧠"),
    Subject(id="habilidades-propedeutica", name="HABILIDADES MÉDICAS II - PROPEDÊUTICA", shortName="Habilidades - Propedêutica", color="primary", icon="🩺"),
    Subject(id="morfofuncional-anatomia", name="MORFOFUNCIONAL II (ANATOMIA)", shortName="Anatomia", color="destructive", icon="🔬"),
    Subject(id="morfofuncional-histologia", name="MORFOFUNCIONAL II (HISTOLOGIA)", shortName="Histologia", color="medical-secondary", icon="🔍"),
    Subject(id="morfofuncional-embriologia", name="MORFOFUNCIONAL II (EMBRIOLOGIA)", shortName="Embriologia", color="medical-accent", icon="🧬"),
    Subject(id="fisiologia-cardiovascular", name="FISIOLOGIA II - CARDIOVASCULAR", shortName="Fisiologia Cardiovascular", color="medical-warning", icon="❤️"),
    Subject(id="fisiologia-respiratoria", name="FISIOLOGIA II - RESPIRATÓRIA", shortName="Fisiologia Respiratória", color="medical-info", icon="🫁"),
    Subject(id="fisiologia-renal", name="FISIOLOGIA II - RENAL", shortName="Fisiologia Renal", color="medical-primary", icon="🩸"),
    Subject(id="bioquimica-metabolismo", name="BIOQUÍMICA II - METABOLISMO", shortName="Bioquímica Metabolismo", color="primary", icon="⚗️"),
    Subject(id="farmacologia-basica", name="FARMACOLOGIA BÁSICA", shortName="Farmacologia", color="destructive", icon="💊"),
    Subject(id="patologia-geral", name="PATOLOGIA GERAL", shortName="Patologia", color="medical-secondary", icon="🦠"),
    Subject(id="microbiologia", name="MICROBIOLOGIA", shortName="Microbiologia", color="medical-accent", icon="🔬"),
    Subject(id="imunologia", name="IMUNOLOGIA", shortName="Imunologia", color="medical-warning", icon="🛡️"),
    Subject(id="parasitologia", name="PARASITOLOGIA", shortName="Parasitologia", color="medical-info", icon="🐛"),
    Subject(id="epidemiologia", name="EPIDEMIOLOGIA", shortName="Epidemiologia", color="medical-primary", icon="📊"),
    Subject(id="saude-publica", name="SAÚDE PÚBLICA", shortName="Saúde Pública", color="primary", icon="🏛️"),
]


class SubjectRepository:
    """Repository for Subject persistence."""

    def __init__(self, store: KeyValueStore | None = None):
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        if self._store is None:
            self._store = get_store()
        return self._store

    def load_custom(self) -> list[Subject] | None:
        """Return the saved custom catalog, or None when the defaults apply."""
        raw = self.store.get(SUBJECTS_KEY)
        if raw is None:
            return None
        try:
            return _subjects_adapter.validate_python(raw)
        except ValidationError as e:
            logger.error("Custom subject catalog is unreadable, using defaults: %s", e.error_count())
            return None

    def list_all(self) -> list[Subject]:
        custom = self.load_custom()
        if custom is None:
            return list(DEFAULT_SUBJECTS)
        return custom

    def save_all(self, subjects: list[Subject]) -> None:
        self.store.set(SUBJECTS_KEY, [s.model_dump(mode="json") for s in subjects])

    def reset(self) -> None:
        """Drop the custom catalog and fall back to the defaults."""
        self.store.delete(SUBJECTS_KEY)

    def get_by_id(self, subject_id: str) -> Subject | None:
        for subject in self.list_all():
            if subject.id == subject_id:
                return subject
        return None


# Singleton instance
_subject_repository: SubjectRepository | None = None


def get_subject_repository() -> SubjectRepository:
    """Get the subject repository singleton."""
    global _subject_repository
    if _subject_repository is None:
        _subject_repository = SubjectRepository()
    return _subject_repository
