"""Reference Crossplane manifests written by ``generate examples``.

The four examples describe one small database platform: an XRD for
``XDatabase``, an AWS composition satisfying it, a claim using it and
the provider package it needs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from crossplane_ai.domains.assistant.manifests import Document, to_yaml
from crossplane_ai.utils.errors import CrossplaneAIError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_EXAMPLES_DIR = "./examples"

XRD_NAME = "xdatabases.example.org"
XRD_GROUP = "example.org"
XRD_VERSION = "v1alpha1"


def composition_example() -> Document:
    return {
        "apiVersion": "apiextensions.crossplane.io/v1",
        "kind": "Composition",
        "metadata": {
            "name": XRD_NAME,
            "labels": {"provider": "aws", "service": "rds"},
        },
        "spec": {
            "compositeTypeRef": {
                "apiVersion": f"{XRD_GROUP}/{XRD_VERSION}",
                "kind": "XDatabase",
            },
            "resources": [
                {
                    "name": "rds-instance",
                    "base": {
                        "apiVersion": "rds.aws.crossplane.io/v1alpha1",
                        "kind": "DBInstance",
                        "spec": {
                            "forProvider": {
                                "dbInstanceClass": "db.t3.micro",
                                "engine": "postgres",
                                "engineVersion": "13.7",
                                "allocatedStorage": 20,
                                "storageType": "gp2",
                            },
                        },
                    },
                    "patches": [
                        {
                            "type": "FromCompositeFieldPath",
                            "fromFieldPath": "spec.parameters.storageGB",
                            "toFieldPath": "spec.forProvider.allocatedStorage",
                        }
                    ],
                }
            ],
        },
    }


def xrd_example() -> Document:
    parameters = {
        "type": "object",
        "properties": {"storageGB": {"type": "integer", "default": 20}},
        "required": ["storageGB"],
    }
    return {
        "apiVersion": "apiextensions.crossplane.io/v1",
        "kind": "CompositeResourceDefinition",
        "metadata": {"name": XRD_NAME},
        "spec": {
            "group": XRD_GROUP,
            "names": {"kind": "XDatabase", "plural": "xdatabases"},
            "versions": [
                {
                    "name": XRD_VERSION,
                    "served": True,
                    "referenceable": True,
                    "schema": {
                        "openAPIV3Schema": {
                            "type": "object",
                            "properties": {
                                "spec": {
                                    "type": "object",
                                    "properties": {"parameters": parameters},
                                    "required": ["parameters"],
                                }
                            },
                        }
                    },
                }
            ],
        },
    }


def claim_example() -> Document:
    return {
        "apiVersion": f"{XRD_GROUP}/{XRD_VERSION}",
        "kind": "XDatabase",
        "metadata": {"name": "my-database"},
        "spec": {
            "parameters": {"storageGB": 50},
            "compositionRef": {"name": XRD_NAME},
        },
    }


def provider_example() -> Document:
    return {
        "apiVersion": "pkg.crossplane.io/v1",
        "kind": "Provider",
        "metadata": {"name": "provider-aws"},
        "spec": {"package": "xpkg.upbound.io/crossplane-contrib/provider-aws:v0.44.0"},
    }


# Example type -> (file name, builder), in listing order
EXAMPLES: dict[str, tuple[str, Callable[[], Document]]] = {
    "composition": ("xdatabase-composition.yaml", composition_example),
    "xrd": ("xdatabase-definition.yaml", xrd_example),
    "claim": ("database-claim.yaml", claim_example),
    "provider": ("provider-aws.yaml", provider_example),
}


def example_types() -> list[str]:
    """Names of the available example types."""
    return list(EXAMPLES)


def render_example(name: str) -> str:
    """Render one example as YAML.

    Raises:
        ValidationError: If ``name`` is not a known example type.
    """
    if name not in EXAMPLES:
        raise ValidationError(
            f"unknown example type '{name}' (available: {', '.join(EXAMPLES)})",
            field="example",
        )
    _, builder = EXAMPLES[name]
    return to_yaml([builder()])


def write_examples(output_dir: str | Path = DEFAULT_EXAMPLES_DIR) -> list[Path]:
    """Write every example into ``output_dir``, creating it if needed.

    Existing files with the same names are overwritten.

    Returns:
        The written paths, in listing order.

    Raises:
        CrossplaneAIError: If the directory or a file cannot be written.
    """
    directory = Path(output_dir).expanduser()
    written = []
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for name, (file_name, _) in EXAMPLES.items():
            path = directory / file_name
            path.write_text(render_example(name), encoding="utf-8")
            written.append(path)
    except OSError as e:
        raise CrossplaneAIError(f"failed to write examples to {directory}: {e}")

    logger.debug(f"Wrote {len(written)} example manifests to {directory}")
    return written
