"""
XML service for writing models to XML files and reading them back.

Models are ``pydantic_xml.BaseXmlModel`` subclasses; their annotations
describe the document, so no separate schema is needed.
"""
from pathlib import Path
from typing import Optional, Type, TypeVar, Union

from lxml import etree
from pydantic import ValidationError
from pydantic_xml import BaseXmlModel
from pydantic_xml.errors import ParsingError

from logger_config import get_logger
from utils.decorators import traced
from utils.exceptions import XMLCodecError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseXmlModel)
PathLike = Union[str, Path]


def default_xml_path(model: type) -> str:
    """``<TypeName>.xml`` in the working directory."""
    return f"{model.__name__}.xml"


class XMLService:
    """Service for XML marshalling."""

    def __init__(self, encoding: str = 'UTF-8', pretty_print: bool = True) -> None:
        self.encoding = encoding
        self.pretty_print = pretty_print

    @traced
    def marshal(self, obj: BaseXmlModel, xml_path: Optional[PathLike] = None) -> bool:
        """
        Write ``obj`` as an XML document.

        Args:
            obj: Model instance to write
            xml_path: Target file; ``<TypeName>.xml`` when omitted

        Returns:
            True once the file is written

        Raises:
            XMLCodecError: If ``obj`` is not an XML model
            OSError: If the file cannot be written
        """
        if not isinstance(obj, BaseXmlModel):
            raise XMLCodecError(
                f'{type(obj).__name__} is not an XML model',
                path=str(xml_path) if xml_path else None,
            )

        path = Path(xml_path or default_xml_path(type(obj)))
        document = obj.to_xml(
            pretty_print=self.pretty_print,
            xml_declaration=True,
            encoding=self.encoding,
        )
        path.write_bytes(document)

        logger.info(f'Wrote {type(obj).__name__} to {path}')
        return True

    @traced
    def unmarshal(self, model: Type[ModelT], xml_path: Optional[PathLike] = None) -> ModelT:
        """
        Read an XML document into a ``model`` instance.

        Args:
            model: Model class describing the document
            xml_path: Source file; ``<TypeName>.xml`` when omitted

        Raises:
            FileNotFoundError: If the file does not exist
            XMLCodecError: If the document is malformed or does not fit the model
        """
        path = Path(xml_path or default_xml_path(model))
        document = path.read_bytes()

        try:
            return model.from_xml(document)
        except (etree.XMLSyntaxError, ParsingError, ValidationError) as e:
            logger.error(f'Failed to read {model.__name__} from {path}: {str(e)}')
            raise XMLCodecError(
                f'Failed to read {model.__name__} from {path}: {str(e)}',
                path=str(path),
            ) from e
