"""
Card Template Service.

The tier template store: brand admins author templates (design plus unlock
conditions) and the unlock engine reads them.
"""
from typing import Any, Dict, List, Optional
from flask import current_app
from ..extensions import db
from ..models import CardTemplate, WalletCard
from ..utils.exceptions import CardTemplateNotFoundError, DuplicateError, ValidationError
from .unlock_conditions import validate_unlock_config


# Request field -> column
TEMPLATE_FIELDS = {
    'name': 'name',
    'tier': 'tier',
    'designConfig': 'design_config',
    'logoUrl': 'logo_url',
    'backgroundGradient': 'background_gradient',
    'textColor': 'text_color',
    'benefits': 'benefits',
    'unlockConditions': 'unlock_conditions',
    'displayOrder': 'display_order',
    'isActive': 'is_active',
}


class CardTemplateService:
    """Read and author one brand's card templates."""

    def __init__(self, brand_id: int):
        self.brand_id = brand_id

    def get_templates(self, include_inactive: bool = False) -> List[CardTemplate]:
        """Templates in display order (the order progress is shown in)."""
        query = CardTemplate.query.filter_by(brand_id=self.brand_id)
        if not include_inactive:
            query = query.filter_by(is_active=True)
        return query.order_by(CardTemplate.display_order.asc(), CardTemplate.id.asc()).all()

    def get_template(self, template_id: int) -> CardTemplate:
        template = CardTemplate.query.filter_by(id=template_id, brand_id=self.brand_id).first()
        if not template:
            raise CardTemplateNotFoundError(template_id)
        return template

    def get_template_by_tier(self, tier: str) -> Optional[CardTemplate]:
        return CardTemplate.query.filter_by(brand_id=self.brand_id, tier=tier).first()

    def create_template(self, data: Dict[str, Any]) -> CardTemplate:
        """
        Create a template from console input (camelCase keys).

        Raises:
            ValidationError: Missing name/tier or invalid unlock conditions
            DuplicateError: The brand already has a template for this tier
        """
        name = (data.get('name') or '').strip()
        tier = (data.get('tier') or '').strip()
        if not name:
            raise ValidationError('name is required', field='name')
        if not tier:
            raise ValidationError('tier is required', field='tier')
        self._validate_conditions(data)

        if self.get_template_by_tier(tier):
            raise DuplicateError('Card template', f"tier '{tier}'")

        template = CardTemplate(brand_id=self.brand_id)
        self._apply(template, {**data, 'name': name, 'tier': tier})
        db.session.add(template)
        db.session.commit()

        current_app.logger.info(f'Card template created: brand {self.brand_id} tier {tier}')
        return template

    def update_template(self, template_id: int, data: Dict[str, Any]) -> CardTemplate:
        """Partial update; only keys present in data are changed."""
        template = self.get_template(template_id)
        self._validate_conditions(data)

        if 'name' in data and not (data.get('name') or '').strip():
            raise ValidationError('name cannot be empty', field='name')

        new_tier = data.get('tier')
        if new_tier is not None:
            new_tier = new_tier.strip()
            if not new_tier:
                raise ValidationError('tier cannot be empty', field='tier')
            existing = self.get_template_by_tier(new_tier)
            if existing and existing.id != template.id:
                raise DuplicateError('Card template', f"tier '{new_tier}'")
            data = {**data, 'tier': new_tier}

        self._apply(template, data)
        db.session.commit()

        current_app.logger.info(f'Card template updated: {template.id} ({template.tier})')
        return template

    def delete_template(self, template_id: int) -> Dict[str, Any]:
        """
        Delete a template, or deactivate it while wallet cards still use it.

        Returns:
            Dict with 'deleted' or 'deactivated' set
        """
        template = self.get_template(template_id)

        in_use = WalletCard.query.filter_by(card_template_id=template.id).count()
        if in_use:
            template.is_active = False
            db.session.commit()
            current_app.logger.info(
                f'Card template {template.id} deactivated instead of deleted ({in_use} cards)'
            )
            return {'deleted': False, 'deactivated': True, 'cards_using_template': in_use}

        db.session.delete(template)
        db.session.commit()
        current_app.logger.info(f'Card template deleted: {template_id}')
        return {'deleted': True, 'deactivated': False, 'cards_using_template': 0}

    def _validate_conditions(self, data: Dict[str, Any]) -> None:
        if 'unlockConditions' not in data:
            return
        errors = validate_unlock_config(data.get('unlockConditions'))
        if errors:
            raise ValidationError('Invalid unlock conditions', field='unlock_conditions', errors=errors)

    def _apply(self, template: CardTemplate, data: Dict[str, Any]) -> None:
        for key, column in TEMPLATE_FIELDS.items():
            if key in data:
                setattr(template, column, data[key])
