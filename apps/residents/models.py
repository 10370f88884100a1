"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Database models for the residents module including
             Resident, Household and HouseholdStatistics.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, Optional
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin
from apps.core.utils import calculate_age, iso


class Gender(models.TextChoices):
    MALE = 'MALE', _('Male')
    FEMALE = 'FEMALE', _('Female')
    OTHER = 'OTHER', _('Other')


class CivilStatus(models.TextChoices):
    SINGLE = 'SINGLE', _('Single')
    MARRIED = 'MARRIED', _('Married')
    WIDOWED = 'WIDOWED', _('Widowed')
    DIVORCED = 'DIVORCED', _('Divorced')
    SEPARATED = 'SEPARATED', _('Separated')


class EmploymentStatus(models.TextChoices):
    EMPLOYED = 'EMPLOYED', _('Employed')
    UNEMPLOYED = 'UNEMPLOYED', _('Unemployed')
    SELF_EMPLOYED = 'SELF_EMPLOYED', _('Self-Employed')
    STUDENT = 'STUDENT', _('Student')
    RETIRED = 'RETIRED', _('Retired')


class HouseholdType(models.TextChoices):
    SINGLE_FAMILY = 'SINGLE_FAMILY', _('Single Family')
    EXTENDED_FAMILY = 'EXTENDED_FAMILY', _('Extended Family')
    MULTI_FAMILY = 'MULTI_FAMILY', _('Multi-Family')
    SINGLE_PERSON = 'SINGLE_PERSON', _('Single Person')
    NON_FAMILY = 'NON_FAMILY', _('Non-Family')


class HouseholdStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', _('Active')
    INACTIVE = 'INACTIVE', _('Inactive')
    RELOCATED = 'RELOCATED', _('Relocated')
    MERGED = 'MERGED', _('Merged')


class Household(AuditLogMixin):
    """
    A dwelling unit registered in the barangay.

    Attributes:
        house_no, street, barangay, city, province, zip_code: Address parts.
        latitude, longitude: Optional map coordinates.
        history: Append-only list of {action, details, timestamp, user}.
        merged_from: IDs of households merged into this one.
    """

    house_no = models.CharField(
        max_length=50,
        verbose_name=_('House No.')
    )
    street = models.CharField(
        max_length=150,
        verbose_name=_('Street')
    )
    barangay = models.CharField(
        max_length=150,
        verbose_name=_('Barangay')
    )
    city = models.CharField(
        max_length=150,
        verbose_name=_('City/Municipality')
    )
    province = models.CharField(
        max_length=150,
        verbose_name=_('Province')
    )
    zip_code = models.CharField(
        max_length=10,
        default='0000',
        verbose_name=_('ZIP Code')
    )
    latitude = models.FloatField(
        null=True,
        blank=True,
        verbose_name=_('Latitude')
    )
    longitude = models.FloatField(
        null=True,
        blank=True,
        verbose_name=_('Longitude')
    )
    type = models.CharField(
        max_length=20,
        choices=HouseholdType.choices,
        default=HouseholdType.SINGLE_FAMILY,
        verbose_name=_('Household Type')
    )
    status = models.CharField(
        max_length=15,
        choices=HouseholdStatus.choices,
        default=HouseholdStatus.ACTIVE,
        verbose_name=_('Status')
    )
    notes = models.TextField(
        blank=True,
        verbose_name=_('Notes')
    )
    history = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('History'),
        help_text=_('Audit trail of membership and address changes.')
    )
    merged_from = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Merged From')
    )

    class Meta:
        verbose_name = _('Household')
        verbose_name_plural = _('Households')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return self.full_address

    @property
    def full_address(self) -> str:
        return ', '.join(
            part for part in (self.house_no, self.street, self.barangay, self.city, self.province)
            if part and part != 'N/A'
        )

    @property
    def is_mapped(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def get_head(self) -> Optional['Resident']:
        return self.residents.filter(is_head_of_household=True).first()

    def to_dict(self, include_residents: bool = False) -> Dict[str, Any]:
        data = {
            'id': self.pk,
            'house_no': self.house_no,
            'street': self.street,
            'barangay': self.barangay,
            'city': self.city,
            'province': self.province,
            'zip_code': self.zip_code,
            'full_address': self.full_address,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'type': self.type,
            'status': self.status,
            'notes': self.notes,
            'merged_from': self.merged_from,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if include_residents:
            residents = self.residents.order_by('-is_head_of_household', 'last_name', 'first_name')
            data['residents'] = [resident.to_summary() for resident in residents]
        return data


class Resident(AuditLogMixin):
    """
    A person registered in the barangay's Registry of Barangay Inhabitants.

    Rules enforced in ResidentForm:
        - occupation is required when employment_status is EMPLOYED;
        - identity_number is required when identity_type is set.
    """

    # Name
    first_name = models.CharField(max_length=100, verbose_name=_('First Name'))
    middle_name = models.CharField(max_length=100, blank=True, verbose_name=_('Middle Name'))
    last_name = models.CharField(max_length=100, verbose_name=_('Last Name'))
    extension_name = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Extension'),
        help_text=_('Jr., Sr., III, etc.')
    )
    alias = models.CharField(max_length=100, blank=True, verbose_name=_('Alias'))

    # Personal information
    birth_date = models.DateField(verbose_name=_('Birth Date'))
    gender = models.CharField(max_length=10, choices=Gender.choices, verbose_name=_('Gender'))
    civil_status = models.CharField(
        max_length=15,
        choices=CivilStatus.choices,
        verbose_name=_('Civil Status')
    )
    contact_no = models.CharField(max_length=30, blank=True, verbose_name=_('Contact No.'))
    email = models.EmailField(blank=True, verbose_name=_('Email'))
    address = models.CharField(max_length=255, verbose_name=_('Address'))

    # Employment and background
    occupation = models.CharField(max_length=150, blank=True, verbose_name=_('Occupation'))
    employment_status = models.CharField(
        max_length=15,
        choices=EmploymentStatus.choices,
        blank=True,
        verbose_name=_('Employment Status')
    )
    unemployment_reason = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Reason for Unemployment')
    )
    educational_attainment = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Educational Attainment')
    )
    blood_type = models.CharField(max_length=5, blank=True, verbose_name=_('Blood Type'))
    religion = models.CharField(max_length=100, blank=True, verbose_name=_('Religion'))
    ethnic_group = models.CharField(max_length=100, blank=True, verbose_name=_('Ethnic Group'))
    nationality = models.CharField(max_length=100, blank=True, default='Filipino', verbose_name=_('Nationality'))

    # Parents
    father_name = models.CharField(max_length=100, blank=True, verbose_name=_("Father's First Name"))
    father_middle_name = models.CharField(max_length=100, blank=True, verbose_name=_("Father's Middle Name"))
    father_last_name = models.CharField(max_length=100, blank=True, verbose_name=_("Father's Last Name"))
    mother_first_name = models.CharField(max_length=100, blank=True, verbose_name=_("Mother's First Name"))
    mother_middle_name = models.CharField(max_length=100, blank=True, verbose_name=_("Mother's Middle Name"))
    mother_maiden_name = models.CharField(max_length=100, blank=True, verbose_name=_("Mother's Maiden Name"))

    # Civic
    voter_in_barangay = models.BooleanField(default=False, verbose_name=_('Registered Voter in Barangay'))
    sectors = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Sectors'),
        help_text=_('Sectoral groups, e.g. ["SENIOR_CITIZEN", "PWD", "SOLO_PARENT"].')
    )
    identity_type = models.CharField(max_length=50, blank=True, verbose_name=_('ID Type'))
    identity_number = models.CharField(max_length=100, blank=True, verbose_name=_('ID Number'))
    user_photo = models.CharField(max_length=255, blank=True, verbose_name=_('Photo Path'))

    # Household membership
    household = models.ForeignKey(
        Household,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='residents',
        verbose_name=_('Household')
    )
    is_head_of_household = models.BooleanField(
        default=False,
        verbose_name=_('Head of Household')
    )

    class Meta:
        verbose_name = _('Resident')
        verbose_name_plural = _('Residents')
        ordering = ['last_name', 'first_name']
        indexes = [
            models.Index(fields=['last_name', 'first_name']),
            models.Index(fields=['birth_date']),
        ]

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name, self.extension_name]
        return ' '.join(part for part in parts if part)

    @property
    def age(self) -> Optional[int]:
        return calculate_age(self.birth_date)

    def to_summary(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'first_name': self.first_name,
            'middle_name': self.middle_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'gender': self.gender,
            'birth_date': iso(self.birth_date),
            'age': self.age,
            'is_head_of_household': self.is_head_of_household,
            'voter_in_barangay': self.voter_in_barangay,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_summary()
        data.update({
            'extension_name': self.extension_name,
            'alias': self.alias,
            'civil_status': self.civil_status,
            'contact_no': self.contact_no,
            'email': self.email,
            'address': self.address,
            'occupation': self.occupation,
            'employment_status': self.employment_status,
            'unemployment_reason': self.unemployment_reason,
            'educational_attainment': self.educational_attainment,
            'blood_type': self.blood_type,
            'religion': self.religion,
            'ethnic_group': self.ethnic_group,
            'nationality': self.nationality,
            'father_name': self.father_name,
            'father_middle_name': self.father_middle_name,
            'father_last_name': self.father_last_name,
            'mother_first_name': self.mother_first_name,
            'mother_middle_name': self.mother_middle_name,
            'mother_maiden_name': self.mother_maiden_name,
            'sectors': self.sectors,
            'identity_type': self.identity_type,
            'identity_number': self.identity_number,
            'user_photo': self.user_photo,
            'household_id': self.household_id,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        })
        return data


class HouseholdStatistics(models.Model):
    """
    Cached demographic counts for a household.

    Recomputed by recompute_household_statistics() whenever
    membership changes.
    """

    household = models.OneToOneField(
        Household,
        on_delete=models.CASCADE,
        related_name='statistics',
        verbose_name=_('Household')
    )
    total_residents = models.PositiveIntegerField(default=0, verbose_name=_('Total Residents'))
    voter_count = models.PositiveIntegerField(default=0, verbose_name=_('Registered Voters'))
    senior_count = models.PositiveIntegerField(default=0, verbose_name=_('Senior Citizens (60+)'))
    minor_count = models.PositiveIntegerField(default=0, verbose_name=_('Minors (under 18)'))
    employed_count = models.PositiveIntegerField(default=0, verbose_name=_('With Occupation'))
    last_updated = models.DateTimeField(auto_now=True, verbose_name=_('Last Updated'))

    class Meta:
        verbose_name = _('Household Statistics')
        verbose_name_plural = _('Household Statistics')

    def __str__(self) -> str:
        return f"Statistics for {self.household}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'household_id': self.household_id,
            'total_residents': self.total_residents,
            'voter_count': self.voter_count,
            'senior_count': self.senior_count,
            'minor_count': self.minor_count,
            'employed_count': self.employed_count,
            'last_updated': iso(self.last_updated),
        }
