from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, TIMESTAMP, CheckConstraint, Index, func

from .base import Base


class Vehicle(Base):
    """
    A tank synced from the Wargaming encyclopedia.

    Raw combat attributes come from the upstream API; score_overall,
    score_tier and score_type are derived by the scoring engine and stay
    NULL until first computed.
    """
    __tablename__ = 'vehicles'

    # Upstream tank_id
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    tier = Column(Integer, nullable=False)
    type = Column(String(50), nullable=False)  # lightTank|mediumTank|heavyTank|AT-SPG|SPG
    nation = Column(String(50), nullable=False)
    is_premium = Column(Boolean, default=False)
    image_url = Column(Text)
    description = Column(Text)

    health = Column(Integer, nullable=False)
    armor_front = Column(Integer, default=0)
    armor_side = Column(Integer, default=0)
    armor_rear = Column(Integer, default=0)
    gun_damage = Column(Integer, default=0)
    gun_penetration = Column(Integer, default=0)
    gun_rof = Column(Numeric(5, 2, asdecimal=False), default=0)
    mobility_speed = Column(Integer, default=0)
    mobility_power = Column(Integer, default=0)

    score_overall = Column(Numeric(8, 3, asdecimal=False), nullable=True)
    score_tier = Column(Numeric(8, 3, asdecimal=False), nullable=True)
    score_type = Column(Numeric(8, 3, asdecimal=False), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('tier >= 1 AND tier <= 10', name='ck_vehicles_tier_range'),
        Index('idx_vehicles_tier', 'tier'),
        Index('idx_vehicles_type', 'type'),
        Index('idx_vehicles_nation', 'nation'),
        Index('idx_vehicles_premium', 'is_premium'),
        Index('idx_vehicles_score_overall', 'score_overall'),
        Index('idx_vehicles_score_tier', 'score_tier'),
        Index('idx_vehicles_score_type', 'score_type'),
    )

    RAW_FIELDS = (
        'name', 'tier', 'type', 'nation', 'is_premium', 'image_url', 'description',
        'health', 'armor_front', 'armor_side', 'armor_rear',
        'gun_damage', 'gun_penetration', 'gun_rof',
        'mobility_speed', 'mobility_power',
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'tier': self.tier,
            'type': self.type,
            'nation': self.nation,
            'is_premium': bool(self.is_premium),
            'image_url': self.image_url,
            'description': self.description,
            'health': self.health,
            'armor_front': self.armor_front,
            'armor_side': self.armor_side,
            'armor_rear': self.armor_rear,
            'gun_damage': self.gun_damage,
            'gun_penetration': self.gun_penetration,
            'gun_rof': self.gun_rof,
            'mobility_speed': self.mobility_speed,
            'mobility_power': self.mobility_power,
            'score_overall': self.score_overall,
            'score_tier': self.score_tier,
            'score_type': self.score_type,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
