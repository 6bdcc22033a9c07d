"""Least-privilege access policy for the dashboard's service role."""

from __future__ import annotations

import json
from dataclasses import dataclass
from string import Template
from typing import Any


class PolicyTemplateError(ValueError):
    """Raised when a policy template cannot be compacted or rendered."""
    pass


@dataclass(frozen=True, slots=True)
class WorkspaceInfo:
    """Identifying attributes of a twin workspace."""
    workspace_id: str
    arn: str
    s3_location: str  # bucket ARN

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> WorkspaceInfo:
        return cls(
            workspace_id=payload["workspaceId"],
            arn=payload["arn"],
            s3_location=payload["s3Location"],
        )


# Placeholders: ${WorkspaceArn}, ${WorkspaceId}, ${S3BucketArn}
POLICY_TEMPLATE = """{
    "Version": "2012-10-17",
    "Statement": [
        {
            "Action": [
                "iottwinmaker:ListWorkspaces"
            ],
            "Resource": [
                "*"
            ],
            "Effect": "Allow"
        },
        {
            "Action": [
                "iottwinmaker:Get*",
                "iottwinmaker:List*"
            ],
            "Resource": [
                "${WorkspaceArn}",
                "${WorkspaceArn}/*"
            ],
            "Effect": "Allow"
        },
        {
            "Effect": "Allow",
            "Action": [
                "kinesisvideo:GetDataEndpoint",
                "kinesisvideo:GetHLSStreamingSessionURL"
            ],
            "Resource": "*"
        },
        {
            "Effect": "Allow",
            "Action": [
                "iotsitewise:GetAssetPropertyValue",
                "iotsitewise:GetInterpolatedAssetPropertyValues"
            ],
            "Resource": "*"
        },
        {
            "Effect": "Allow",
            "Action": [
                "iotsitewise:BatchPutAssetPropertyValue"
            ],
            "Resource": "*",
            "Condition": {
                "StringLike": {
                    "aws:ResourceTag/EdgeConnectorForKVS": "*${WorkspaceId}*"
                }
            }
        },
        {
            "Effect": "Allow",
            "Action": ["s3:GetObject"],
            "Resource": [
                "${S3BucketArn}",
                "${S3BucketArn}/*"
            ]
        }
    ]
}"""


def compact_json(text: str) -> str:
    """Strip insignificant whitespace from a JSON document."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise PolicyTemplateError(f"Policy template is not valid JSON: {e}") from e
    return json.dumps(document, separators=(",", ":"))


def _escape(value: str) -> str:
    return json.dumps(value)[1:-1]


def render_policy(template: str, workspace: WorkspaceInfo) -> str:
    """
    Compact a policy template and substitute the workspace attributes.

    Raises:
        PolicyTemplateError: On invalid JSON, a malformed placeholder,
            or a placeholder with no value.
    """
    compacted = compact_json(template)
    # Placeholders sit inside JSON strings; values are escaped to match
    values = {
        "S3BucketArn": _escape(workspace.s3_location),
        "WorkspaceArn": _escape(workspace.arn),
        "WorkspaceId": _escape(workspace.workspace_id),
    }
    try:
        return Template(compacted).substitute(values)
    except KeyError as e:
        raise PolicyTemplateError(f"Unknown placeholder in policy template: {e}") from e
    except ValueError as e:
        raise PolicyTemplateError(f"Malformed policy template: {e}") from e


def build_policy(workspace: WorkspaceInfo) -> str:
    """Render the built-in read-only dashboard policy for a workspace."""
    return render_policy(POLICY_TEMPLATE, workspace)


def load_policy_template(path: str) -> str:
    """Read a custom policy template file."""
    with open(path, "r") as f:
        return f.read()
