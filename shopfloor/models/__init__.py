from shopfloor.models.article import Article
from shopfloor.models.entry import Entry
from shopfloor.models.entry_value import EntryValue
from shopfloor.models.field_definition import FieldDefinition
from shopfloor.models.field_validation import FieldValidation

__all__ = [ "Article", "Entry", "EntryValue",
           "FieldDefinition", "FieldValidation" ]
