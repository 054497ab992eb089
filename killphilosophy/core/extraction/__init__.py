from .structural_extractor import StructuralExtractor, ExtractionRule, first_match
from .academic_extractor import AcademicExtractor

__all__ = ["StructuralExtractor", "ExtractionRule", "first_match", "AcademicExtractor"]
