"""Catalog of deployment platforms and the rules that match agents to them."""

import re

import structlog

from agenly.models import (
    Agent,
    CompatibilityReport,
    CostEstimate,
    DeploymentMethod,
    PlatformConfig,
    PlatformType,
)
from agenly.models.deployment import Compliance, CostModel, TechnicalRequirements

logger = structlog.get_logger()


def _platform(
    id: str,
    name: str,
    type: PlatformType,
    method: DeploymentMethod,
    capabilities: list[str],
    limitations: list[str],
    requirements: tuple[bool, bool, bool, bool],
    compliance: tuple[bool, bool, bool, bool],
    monthly: float = 0.0,
    per_interaction: float | None = None,
) -> PlatformConfig:
    ssl, cors, webhooks, realtime = requirements
    gdpr, ccpa, hipaa, soc2 = compliance
    return PlatformConfig(
        id=id,
        name=name,
        type=type,
        deployment_method=method,
        capabilities=capabilities,
        limitations=limitations,
        cost_estimate=CostModel(setup=0.0, monthly=monthly, per_interaction=per_interaction),
        technical_requirements=TechnicalRequirements(
            ssl=ssl, cors=cors, webhooks=webhooks, realtime=realtime
        ),
        compliance=Compliance(gdpr=gdpr, ccpa=ccpa, hipaa=hipaa, soc2=soc2),
    )


DEFAULT_PLATFORMS: list[PlatformConfig] = [
    # Web
    _platform(
        "website-widget", "Website Widget", PlatformType.WEB, DeploymentMethod.EMBED,
        ["chat", "forms", "analytics", "customization"],
        ["offline-mode", "native-features"],
        (True, True, True, True), (True, True, False, False),
    ),
    _platform(
        "wordpress-plugin", "WordPress Plugin", PlatformType.WEB, DeploymentMethod.PLUGIN,
        ["chat", "forms", "analytics", "seo", "woocommerce"],
        ["performance", "security"],
        (True, False, True, False), (True, True, False, False),
    ),
    _platform(
        "shopify-app", "Shopify App", PlatformType.ECOMMERCE, DeploymentMethod.PLUGIN,
        ["chat", "product-recommendations", "cart-management", "analytics"],
        ["custom-themes", "advanced-integrations"],
        (True, True, True, True), (True, True, False, True),
        monthly=29.99,
    ),
    # Messaging
    _platform(
        "whatsapp-business", "WhatsApp Business", PlatformType.MESSAGING, DeploymentMethod.API,
        ["chat", "media", "templates", "buttons"],
        ["rich-media", "custom-ui"],
        (True, False, True, True), (True, True, False, True),
        per_interaction=0.005,
    ),
    _platform(
        "facebook-messenger", "Facebook Messenger", PlatformType.MESSAGING, DeploymentMethod.API,
        ["chat", "rich-cards", "quick-replies", "persistent-menu"],
        ["privacy", "business-verification"],
        (True, False, True, True), (True, True, False, True),
    ),
    _platform(
        "telegram-bot", "Telegram Bot", PlatformType.MESSAGING, DeploymentMethod.API,
        ["chat", "inline-keyboards", "commands", "channels"],
        ["business-features", "analytics"],
        (True, False, True, True), (True, True, False, False),
    ),
    # CRM
    _platform(
        "hubspot-app", "HubSpot App", PlatformType.CRM, DeploymentMethod.PLUGIN,
        ["chat", "lead-management", "workflow-automation", "analytics"],
        ["custom-fields", "advanced-integrations"],
        (True, True, True, True), (True, True, False, True),
    ),
    _platform(
        "salesforce-app", "Salesforce App", PlatformType.CRM, DeploymentMethod.PLUGIN,
        ["chat", "lead-management", "workflow-automation", "lightning-components"],
        ["custom-objects", "advanced-permissions"],
        (True, True, True, True), (True, True, True, True),
    ),
    # Mobile
    _platform(
        "react-native-sdk", "React Native SDK", PlatformType.MOBILE, DeploymentMethod.SDK,
        ["chat", "push-notifications", "offline-mode", "native-features"],
        ["platform-specific", "app-store-approval"],
        (True, False, True, True), (True, True, False, False),
    ),
    _platform(
        "flutter-sdk", "Flutter SDK", PlatformType.MOBILE, DeploymentMethod.SDK,
        ["chat", "push-notifications", "offline-mode", "cross-platform"],
        ["platform-specific", "app-store-approval"],
        (True, False, True, True), (True, True, False, False),
    ),
    # Containers
    _platform(
        "docker-container", "Docker Container", PlatformType.WEB, DeploymentMethod.CONTAINER,
        ["chat", "analytics", "custom-integrations", "scaling"],
        ["infrastructure-management", "security"],
        (True, True, True, True), (True, True, True, True),
    ),
    _platform(
        "kubernetes-helm", "Kubernetes Helm Chart", PlatformType.WEB, DeploymentMethod.CONTAINER,
        ["chat", "analytics", "auto-scaling", "high-availability"],
        ["complexity", "infrastructure-requirements"],
        (True, True, True, True), (True, True, True, True),
    ),
]

# English and French phrasing seen in user conversations
PLATFORM_KEYWORDS: dict[str, list[str]] = {
    "website-widget": ["site web", "website", "site internet", "page web", "web page"],
    "wordpress-plugin": ["wordpress", "wp", "blog"],
    "shopify-app": ["shopify", "boutique en ligne", "online store", "e-commerce", "ecommerce"],
    "whatsapp-business": ["whatsapp", "whats app", "wa"],
    "facebook-messenger": ["facebook", "messenger", "fb messenger"],
    "telegram-bot": ["telegram", "tg"],
    "hubspot-app": ["hubspot", "crm"],
    "salesforce-app": ["salesforce", "sfdc"],
    "react-native-sdk": ["react native", "mobile app", "application mobile"],
    "flutter-sdk": ["flutter", "mobile app", "application mobile"],
    "docker-container": ["docker", "container", "serveur", "server"],
    "kubernetes-helm": ["kubernetes", "k8s", "helm", "cluster"],
}

BUSINESS_RECOMMENDATIONS: dict[str, list[str]] = {
    "restaurant": ["website-widget", "whatsapp-business", "facebook-messenger"],
    "ecommerce": ["shopify-app", "website-widget", "whatsapp-business"],
    "service": ["website-widget", "hubspot-app", "whatsapp-business"],
    "consulting": ["hubspot-app", "salesforce-app", "website-widget"],
    "retail": ["shopify-app", "website-widget", "whatsapp-business"],
    "healthcare": ["website-widget", "hubspot-app", "docker-container"],
    "education": ["website-widget", "telegram-bot", "react-native-sdk"],
    "real-estate": ["website-widget", "hubspot-app", "facebook-messenger"],
}


def _contains_keyword(text: str, keyword: str) -> bool:
    """Whole-word match for short keywords, substring match otherwise."""
    if len(keyword) <= 3:
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


class PlatformCatalog:
    """Registry of deployment platforms."""

    def __init__(self, platforms: list[PlatformConfig] | None = None) -> None:
        self._platforms: dict[str, PlatformConfig] = {
            p.id: p for p in (platforms if platforms is not None else DEFAULT_PLATFORMS)
        }

    def get_platform(self, platform_id: str) -> PlatformConfig | None:
        return self._platforms.get(platform_id)

    def get_all_platforms(self) -> list[PlatformConfig]:
        return list(self._platforms.values())

    def detect_platform_from_conversation(self, message: str) -> list[PlatformConfig]:
        """Platforms mentioned in a free-text message, in catalog keyword order."""
        text = message.lower()
        detected = []
        for platform_id, keywords in PLATFORM_KEYWORDS.items():
            if any(_contains_keyword(text, keyword) for keyword in keywords):
                platform = self._platforms.get(platform_id)
                if platform:
                    detected.append(platform)
        return detected

    def recommend_platforms(self, business_type: str) -> list[PlatformConfig]:
        ids = BUSINESS_RECOMMENDATIONS.get(business_type.lower(), ["website-widget"])
        return [self._platforms[i] for i in ids if i in self._platforms]

    def validate_compatibility(self, agent: Agent, platform: PlatformConfig) -> CompatibilityReport:
        """Check an agent's needs against what the platform supports."""
        issues: list[str] = []
        recommendations: list[str] = []

        if "file-upload" in agent.capabilities and "media" not in platform.capabilities:
            issues.append("The agent needs file support but the platform does not support it")

        if "real-time" in agent.capabilities and not platform.technical_requirements.realtime:
            issues.append("The agent needs real-time messaging but the platform does not support it")

        if agent.integrations and not platform.technical_requirements.webhooks:
            issues.append("The agent has integrations but the platform does not support webhooks")

        if platform.type == PlatformType.ECOMMERCE and "product-recommendations" not in agent.capabilities:
            recommendations.append(
                "Consider adding product recommendations for this e-commerce platform"
            )

        if platform.type == PlatformType.MESSAGING and "quick-replies" not in agent.capabilities:
            recommendations.append(
                "Add quick replies to improve the experience on this messaging platform"
            )

        report = CompatibilityReport(
            compatible=not issues,
            issues=issues,
            recommendations=recommendations,
        )
        logger.debug(
            "Compatibility checked",
            agent_id=agent.id,
            platform_id=platform.id,
            compatible=report.compatible,
        )
        return report

    def estimate_costs(self, platform: PlatformConfig, expected_interactions: int = 1000) -> CostEstimate:
        setup = platform.cost_estimate.setup
        monthly = platform.cost_estimate.monthly
        per_interaction = platform.cost_estimate.per_interaction or 0.0

        interaction_cost = expected_interactions * per_interaction
        total = setup + monthly + interaction_cost

        return CostEstimate(
            setup=setup,
            monthly=monthly,
            total=total,
            breakdown=[
                f"Setup: ${setup:g}",
                f"Monthly: ${monthly:g}",
                f"Interactions ({expected_interactions}): ${interaction_cost:.2f}",
                f"Total: ${total:.2f}",
            ],
        )
