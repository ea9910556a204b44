"""Deployment models: platforms, packages and channel deployments.

These payloads travel to JS clients, so they serialise in camelCase while
accepting either spelling on input.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ==================== Platforms ====================


class PlatformType(str, Enum):
    WEB = "web"
    MOBILE = "mobile"
    SOCIAL = "social"
    ECOMMERCE = "ecommerce"
    CRM = "crm"
    MESSAGING = "messaging"


class DeploymentMethod(str, Enum):
    EMBED = "embed"
    API = "api"
    PLUGIN = "plugin"
    SDK = "sdk"
    CONTAINER = "container"


class CostModel(CamelModel):
    setup: float = 0.0
    monthly: float = 0.0
    per_interaction: float | None = None


class TechnicalRequirements(CamelModel):
    ssl: bool = True
    cors: bool = False
    webhooks: bool = False
    realtime: bool = False


class Compliance(CamelModel):
    gdpr: bool = False
    ccpa: bool = False
    hipaa: bool = False
    soc2: bool = False


class PlatformConfig(CamelModel):
    """A third-party platform an agent can be packaged for."""

    id: str
    name: str
    type: PlatformType
    capabilities: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)
    deployment_method: DeploymentMethod
    cost_estimate: CostModel = Field(default_factory=CostModel)
    technical_requirements: TechnicalRequirements = Field(default_factory=TechnicalRequirements)
    compliance: Compliance = Field(default_factory=Compliance)


class CompatibilityReport(CamelModel):
    compatible: bool
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class CostEstimate(CamelModel):
    setup: float
    monthly: float
    total: float
    breakdown: list[str] = Field(default_factory=list)


# ==================== Packages ====================


class PackageType(str, Enum):
    WIDGET = "widget"
    API = "api"
    PLUGIN = "plugin"
    SDK = "sdk"
    CONTAINER = "container"


class FileType(str, Enum):
    HTML = "html"
    CSS = "css"
    JS = "js"
    JSON = "json"
    DOCKERFILE = "dockerfile"
    YAML = "yaml"
    PHP = "php"
    PY = "py"
    JAVA = "java"
    DART = "dart"


class PackageFile(CamelModel):
    """One generated file inside a deployment package."""

    name: str
    content: str
    type: FileType
    size: int

    @classmethod
    def of(cls, name: str, content: str, file_type: FileType) -> "PackageFile":
        return cls(name=name, content=content, type=file_type, size=len(content))


class Branding(CamelModel):
    primary_color: str | None = None
    secondary_color: str | None = None
    logo: str | None = None
    font_family: str | None = None


class FeatureToggles(CamelModel):
    multi_language: bool = False
    dark_mode: bool = False
    analytics: bool = False
    webhooks: bool = False


class Customizations(CamelModel):
    branding: Branding | None = None
    features: FeatureToggles | None = None
    integrations: dict[str, str] | None = None


class DeploymentOptions(CamelModel):
    hosting: str = "cloud"  # cloud | onpremise | hybrid
    scaling: str = "auto"  # auto | manual
    monitoring: bool = False
    backup: bool = False


class DeploymentRequest(CamelModel):
    """Input to the package builder."""

    agent_id: str
    platform_id: str
    customizations: Customizations | None = None
    deployment_options: DeploymentOptions | None = None


class DeploymentPackage(CamelModel):
    """Generated artifact needed to run an agent on a target platform."""

    id: str = Field(..., description="Package identifier")
    agent_id: str
    platform_id: str
    package_type: PackageType
    files: list[PackageFile] = Field(default_factory=list)
    installation_instructions: str = ""
    configuration_guide: str = ""
    customizations: Customizations | None = None
    deployment_options: DeploymentOptions | None = None
    support_contact: str = ""
    version: str = "1.0.0"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    expires_at: datetime | None = None

    def find_file(self, name: str) -> PackageFile | None:
        return next((f for f in self.files if f.name == name), None)


# ==================== Channel deployments ====================


class DeploymentType(str, Enum):
    WEB = "web"
    IFRAME = "iframe"
    API = "api"


class DeploymentConfig(CamelModel):
    """A live web/iframe/api deployment of an agent."""

    id: str
    agent_id: str
    user_id: str
    type: DeploymentType
    url: str | None = None
    embed_code: str | None = None
    api_key: str | None = None
    is_active: bool = True
    domain: str | None = None
    custom_css: str | None = None
    custom_js: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class DeploymentStats(CamelModel):
    total_requests: int
    active_users: int
    avg_response_time: float
    last_used: datetime | None = None
