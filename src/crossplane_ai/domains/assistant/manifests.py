"""Template-based Crossplane manifest generation."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import yaml

DEFAULT_PROVIDER = "aws"
GENERATED_BY_LABEL = {"generated-by": "crossplane-ai"}

Document = dict[str, Any]


def resolve_provider(provider: str | None) -> str:
    """Empty or "auto" selects the default provider."""
    if not provider or provider.strip().lower() == "auto":
        return DEFAULT_PROVIDER
    return provider.strip().lower()


def _metadata(name: str, /, **labels: str) -> dict[str, Any]:
    return {
        "name": name,
        "namespace": "default",
        "labels": {**GENERATED_BY_LABEL, **labels},
    }


def _provider_config() -> dict[str, str]:
    return {"name": "default"}


def database_documents(description: str, provider: str) -> list[Document]:
    engine = "postgres" if "postgres" in description.lower() else "mysql"
    version = "13.7" if engine == "postgres" else "8.0"
    return [
        {
            "apiVersion": f"rds.{provider}.crossplane.io/v1alpha1",
            "kind": "DBInstance",
            "metadata": _metadata("my-database"),
            "spec": {
                "forProvider": {
                    "region": "us-east-1",
                    "dbInstanceClass": "db.t3.micro",
                    "engine": engine,
                    "engineVersion": version,
                    "dbName": "myapp",
                    "masterUsername": "admin",
                    "allocatedStorage": 20,
                    "storageType": "gp2",
                    "storageEncrypted": True,
                    "backupRetentionPeriod": 7,
                    "multiAZ": False,
                    "publiclyAccessible": False,
                },
                "writeConnectionSecretToRef": {
                    "name": "my-database-connection",
                    "namespace": "default",
                },
                "providerConfigRef": _provider_config(),
            },
        }
    ]


def storage_documents(description: str, provider: str) -> list[Document]:
    versioning = "Enabled" if "version" in description.lower() else "Suspended"
    return [
        {
            "apiVersion": f"s3.{provider}.crossplane.io/v1beta1",
            "kind": "Bucket",
            "metadata": _metadata("my-app-bucket"),
            "spec": {
                "forProvider": {
                    "locationConstraint": "us-east-1",
                    "versioningConfiguration": {"status": versioning},
                    "serverSideEncryptionConfiguration": {
                        "rules": [{"applyServerSideEncryptionByDefault": {"sseAlgorithm": "AES256"}}]
                    },
                    "publicAccessBlockConfiguration": {
                        "blockPublicAcls": True,
                        "blockPublicPolicy": True,
                        "ignorePublicAcls": True,
                        "restrictPublicBuckets": True,
                    },
                },
                "providerConfigRef": _provider_config(),
            },
        }
    ]


def network_documents(description: str, provider: str) -> list[Document]:
    api_version = f"ec2.{provider}.crossplane.io/v1beta1"
    return [
        {
            "apiVersion": api_version,
            "kind": "VPC",
            "metadata": _metadata("my-vpc", name="my-vpc"),
            "spec": {
                "forProvider": {
                    "region": "us-east-1",
                    "cidrBlock": "10.0.0.0/16",
                    "tags": [{"key": "Name", "value": "MyVPC"}],
                },
                "providerConfigRef": _provider_config(),
            },
        },
        {
            "apiVersion": api_version,
            "kind": "Subnet",
            "metadata": _metadata("my-subnet-public", name="my-subnet-public"),
            "spec": {
                "forProvider": {
                    "region": "us-east-1",
                    "availabilityZone": "us-east-1a",
                    "cidrBlock": "10.0.1.0/24",
                    "mapPublicIPOnLaunch": True,
                    "vpcIdSelector": {"matchLabels": {"name": "my-vpc"}},
                },
                "providerConfigRef": _provider_config(),
            },
        },
    ]


def compute_documents(description: str, provider: str) -> list[Document]:
    return [
        {
            "apiVersion": f"ec2.{provider}.crossplane.io/v1alpha1",
            "kind": "Instance",
            "metadata": _metadata("my-instance"),
            "spec": {
                "forProvider": {
                    "region": "us-east-1",
                    "instanceType": "t3.micro",
                    "imageId": "ami-0abcdef1234567890",
                    "keyName": "my-key-pair",
                    "subnetIdSelector": {"matchLabels": {"name": "my-subnet-public"}},
                    "securityGroupIdSelector": {"matchLabels": {"name": "my-security-group"}},
                    "tags": [{"key": "Name", "value": "MyInstance"}],
                },
                "providerConfigRef": _provider_config(),
            },
        }
    ]


def web_app_documents(description: str, provider: str) -> list[Document]:
    return [
        {
            "apiVersion": f"elbv2.{provider}.crossplane.io/v1alpha1",
            "kind": "LoadBalancer",
            "metadata": _metadata("my-web-lb"),
            "spec": {
                "forProvider": {
                    "region": "us-east-1",
                    "scheme": "internet-facing",
                    "loadBalancerType": "application",
                    "subnetIdSelector": {"matchLabels": {"network": "public"}},
                },
                "providerConfigRef": _provider_config(),
            },
        },
        {
            "apiVersion": f"rds.{provider}.crossplane.io/v1alpha1",
            "kind": "DBInstance",
            "metadata": _metadata("my-web-db"),
            "spec": {
                "forProvider": {
                    "region": "us-east-1",
                    "dbInstanceClass": "db.t3.micro",
                    "engine": "mysql",
                    "engineVersion": "8.0",
                    "dbName": "webapp",
                    "masterUsername": "admin",
                    "allocatedStorage": 20,
                    "storageEncrypted": True,
                },
                "writeConnectionSecretToRef": {
                    "name": "my-web-db-connection",
                    "namespace": "default",
                },
                "providerConfigRef": _provider_config(),
            },
        },
    ]


def composition_documents(description: str, provider: str) -> list[Document]:
    return [
        {
            "apiVersion": "apiextensions.crossplane.io/v1",
            "kind": "Composition",
            "metadata": {
                "name": "my-custom-resource",
                "labels": {**GENERATED_BY_LABEL, "provider": provider},
            },
            "spec": {
                "compositeTypeRef": {
                    "apiVersion": "example.com/v1alpha1",
                    "kind": "XCustomResource",
                },
                "resources": [],
            },
        }
    ]


# Checked in order; first keyword hit selects the template
TEMPLATE_KEYWORDS: tuple[tuple[tuple[str, ...], Callable[[str, str], list[Document]]], ...] = (
    (("database", "db", "mysql", "postgres"), database_documents),
    (("storage", "bucket", "s3"), storage_documents),
    (("network", "vpc", "subnet"), network_documents),
    (("server", "instance", "compute"), compute_documents),
    (("web app", "application"), web_app_documents),
)


def build_documents(description: str, provider: str | None = None) -> list[Document]:
    """Select a template by keyword and build its documents."""
    resolved = resolve_provider(provider)
    text = description.lower()
    for keywords, builder in TEMPLATE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return builder(description, resolved)
    return composition_documents(description, resolved)


def to_yaml(documents: list[Document], header: str | None = None) -> str:
    """Render documents as a multi-document YAML stream."""
    body = yaml.safe_dump_all(documents, sort_keys=False, default_flow_style=False)
    if header:
        comments = "\n".join(f"# {line}" if line else "#" for line in header.splitlines())
        return f"{comments}\n{body}"
    return body


def generate_template_manifest(description: str, provider: str | None = None) -> str:
    """Generate a YAML manifest for a natural-language description."""
    documents = build_documents(description, provider)
    header = f"Generated by crossplane-ai for: {description}\nProvider: {resolve_provider(provider)}"
    return to_yaml(documents, header=header)


def manifest_to_json(manifest: str) -> str:
    """Convert a YAML manifest to JSON.

    A single document becomes an object, several become an array. Text that
    does not parse as YAML mappings is wrapped as ``{"manifest": text}``.
    """
    try:
        documents = [doc for doc in yaml.safe_load_all(manifest) if doc is not None]
    except yaml.YAMLError:
        documents = []

    if not documents or not all(isinstance(doc, dict) for doc in documents):
        return json.dumps({"manifest": manifest}, indent=2)
    if len(documents) == 1:
        return json.dumps(documents[0], indent=2)
    return json.dumps(documents, indent=2)
