"""Project importer: decodes cloud bundles and installs them locally."""

from .project_importer import (
    BLOCKS_PROJECT_NAME,
    CONFIG_NAME,
    DecodedPayload,
    PayloadShape,
    ProjectImporter,
    classify_payload,
    decode_project,
)

__all__ = [
    'BLOCKS_PROJECT_NAME',
    'CONFIG_NAME',
    'DecodedPayload',
    'PayloadShape',
    'ProjectImporter',
    'classify_payload',
    'decode_project',
]
