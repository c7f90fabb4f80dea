"""Re-export all models so Base.metadata sees them."""

from sitecms.db.models.billing_cycle import BillingCycle, PlanPricing
from sitecms.db.models.faq import FAQ, FAQCategory, FAQSection, FAQSectionCategory
from sitecms.db.models.feature_group import Feature, FeatureGroup, FeatureGroupItem
from sitecms.db.models.form import Form, FormField, FormSubmission
from sitecms.db.models.hero_section import CTAButton, HeroSection
from sitecms.db.models.html_section import HtmlSection
from sitecms.db.models.media_section import MediaSection, MediaSectionFeature
from sitecms.db.models.newsletter import NewsletterSubscriber
from sitecms.db.models.page import Page, PageSection
from sitecms.db.models.plan import Plan
from sitecms.db.models.plan_feature import BasicFeature, PlanBasicFeature, PlanFeatureLimit, PlanFeatureType
from sitecms.db.models.pricing_section import PricingSection, PricingSectionPlan
from sitecms.db.models.site_settings import SiteSettings

__all__ = [
    "BasicFeature",
    "BillingCycle",
    "CTAButton",
    "FAQ",
    "FAQCategory",
    "FAQSection",
    "FAQSectionCategory",
    "Feature",
    "FeatureGroup",
    "FeatureGroupItem",
    "Form",
    "FormField",
    "FormSubmission",
    "HeroSection",
    "HtmlSection",
    "MediaSection",
    "MediaSectionFeature",
    "NewsletterSubscriber",
    "Page",
    "PageSection",
    "Plan",
    "PlanBasicFeature",
    "PlanFeatureLimit",
    "PlanFeatureType",
    "PlanPricing",
    "PricingSection",
    "PricingSectionPlan",
    "SiteSettings",
]
