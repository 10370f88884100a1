"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Core models for the barangay profile, elected officials
             and the Sangguniang Barangay council roster.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, List
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import TimeStampedMixin, StatusMixin


class SingletonModel(TimeStampedMixin):
    """
    Abstract base for configuration tables holding exactly one row.

    The row always uses primary key 1 and is created on first access.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        """Return the single instance, creating it with defaults if needed."""
        obj, _created = cls.objects.get_or_create(pk=1)
        return obj


class BarangayInfo(SingletonModel):
    """
    Profile of the barangay printed on certificates and reports.

    Attributes:
        name: Barangay name (e.g., "San Isidro").
        district: Legislative or city district.
        city: City or municipality.
        province: Province.
        footer_text: Text printed at the bottom of issued documents.
    """

    name = models.CharField(
        max_length=150,
        default='Barangay',
        verbose_name=_('Barangay Name')
    )
    district = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('District')
    )
    city = models.CharField(
        max_length=150,
        default='City',
        verbose_name=_('City/Municipality')
    )
    province = models.CharField(
        max_length=150,
        default='Province',
        verbose_name=_('Province')
    )
    address = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Barangay Hall Address')
    )
    contact_number = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_('Contact Number')
    )
    email = models.EmailField(
        blank=True,
        verbose_name=_('Email Address')
    )
    website = models.URLField(
        blank=True,
        verbose_name=_('Website')
    )
    postal_code = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Postal Code')
    )
    logo = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Logo Path'),
        help_text=_('Path or URL of the barangay seal.')
    )
    footer_text = models.TextField(
        blank=True,
        verbose_name=_('Document Footer'),
        help_text=_('Printed at the bottom of certificates and reports.')
    )

    class Meta:
        verbose_name = _('Barangay Information')
        verbose_name_plural = _('Barangay Information')

    def __str__(self) -> str:
        return f"Barangay {self.name}, {self.city}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'district': self.district,
            'city': self.city,
            'province': self.province,
            'address': self.address,
            'contact_number': self.contact_number,
            'email': self.email,
            'website': self.website,
            'postal_code': self.postal_code,
            'logo': self.logo,
            'footer_text': self.footer_text,
        }


class Officials(SingletonModel):
    """Names of the signing officials of the barangay."""

    punong_barangay = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Punong Barangay')
    )
    secretary = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Barangay Secretary')
    )
    treasurer = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Barangay Treasurer')
    )

    class Meta:
        verbose_name = _('Officials')
        verbose_name_plural = _('Officials')

    def __str__(self) -> str:
        return self.punong_barangay or 'Barangay Officials'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'punong_barangay': self.punong_barangay,
            'secretary': self.secretary,
            'treasurer': self.treasurer,
        }

    def as_list(self) -> List[Dict[str, Any]]:
        """
        Flatten officials and active council members into one roster.

        Main officials come first (only those with a name set), followed
        by active council members in their display order.
        """
        roster = []
        for key, field, position in (
            ('punong', 'punong_barangay', 'Punong Barangay'),
            ('secretary', 'secretary', 'Secretary'),
            ('treasurer', 'treasurer', 'Treasurer'),
        ):
            name = getattr(self, field)
            if name:
                roster.append({
                    'id': f"{self.pk}-{key}",
                    'name': name,
                    'position': position,
                })
        for member in CouncilMember.objects.filter(is_active=True):
            roster.append({
                'id': member.pk,
                'name': member.name,
                'position': member.position or 'Council Member',
            })
        return roster


class CouncilMember(TimeStampedMixin, StatusMixin):
    """A member of the Sangguniang Barangay shown on certificates."""

    name = models.CharField(
        max_length=150,
        verbose_name=_('Name')
    )
    position = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Position'),
        help_text=_('e.g., Kagawad, SK Chairperson.')
    )
    order = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Display Order')
    )

    class Meta:
        verbose_name = _('Council Member')
        verbose_name_plural = _('Council Members')
        ordering = ['order', 'name']

    def __str__(self) -> str:
        return f"{self.name} ({self.position})" if self.position else self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'name': self.name,
            'position': self.position,
            'order': self.order,
            'is_active': self.is_active,
        }
