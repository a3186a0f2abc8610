"""
Linear particle tracking through a constructed accelerator model.

ParticleTracker transports every particle of a bunch through the components
of an AcceleratorModel with first-order maps:

- Drift: field-free transport
- SectorBend: sector map with curvature mismatch and dispersion
- Quadrupole, SkewQuadrupole: thick-lens maps
- Sextupole, SkewSextupole, Octupole, RectMultipole: drift-kick-drift
- XCor, YCor: dipole kick
- Solenoid: solenoid map
- SRot: rotation about the beam axis

Every other component transports as a drift of its length, or raises
TrackingError in strict mode when it has a length. Longitudinal
coordinates (ct, dp) are not changed; RF energy gain is not modelled.
"""

from ..constants import GEV, SPEED_OF_LIGHT
from ..exceptions import TrackingError
from ..machine_portal.element import Element, MultipoleField
from ..machine_portal.model import AcceleratorModel
from ..machine_portal.drift import Drift
from ..machine_portal.bend import SectorBend
from ..machine_portal.multipole import MultipoleMagnet, RectMultipole
from ..machine_portal.quadrupole import Quadrupole, SkewQuadrupole
from ..machine_portal.corrector import XCor, YCor
from ..machine_portal.solenoid import Solenoid
from ..machine_portal.srot import SRot
from ..particles.bunch import ParticleBunch
from typing import Callable, Dict, Optional, Type
import logging
import numpy as np

logger = logging.getLogger(__name__)

X, XP, Y, YP, CT, DP = range(6)


def _focusing_functions(K: np.ndarray, length: float):
    """Principal trajectories C, S and the integral D of S for focusing strength K (1/m^2)."""
    K = np.asarray(K, dtype=float)
    C = np.ones_like(K)
    S = np.full_like(K, length)
    D = np.full_like(K, length * length / 2)

    pos = K > 0
    if np.any(pos):
        w = np.sqrt(K[pos])
        C[pos] = np.cos(w * length)
        S[pos] = np.sin(w * length) / w
        D[pos] = (1 - C[pos]) / K[pos]

    neg = K < 0
    if np.any(neg):
        w = np.sqrt(-K[neg])
        C[neg] = np.cosh(w * length)
        S[neg] = np.sinh(w * length) / w
        D[neg] = (1 - C[neg]) / K[neg]
    return C, S, D


def _rotate(coords: np.ndarray, angle: float):
    """Rotate the transverse coordinates in place by angle about the beam axis."""
    if angle == 0:
        return
    c, s = np.cos(angle), np.sin(angle)
    x, y = coords[:, X].copy(), coords[:, Y].copy()
    coords[:, X] = c * x + s * y
    coords[:, Y] = -s * x + c * y
    xp, yp = coords[:, XP].copy(), coords[:, YP].copy()
    coords[:, XP] = c * xp + s * yp
    coords[:, YP] = -s * xp + c * yp


class ParticleTracker:
    """
    Tracks bunches through an AcceleratorModel.

    The strengths stored in the components are fields (T, T/m, ...); they
    are converted to optics strengths with the rigidity of the bunch being
    tracked, so the same model can be used for any species and momentum.

    Example:
        >>> tracker = ParticleTracker(model)
        >>> tracker.track(bunch)
    """

    def __init__(self, model: AcceleratorModel, strict: bool = False):
        self.model = model
        self.strict = strict
        self._maps: Dict[Type[Element], Callable] = {
            Drift: self._track_drift,
            SectorBend: self._track_sector_bend,
            Quadrupole: self._track_quadrupole,
            SkewQuadrupole: self._track_skew_quadrupole,
            RectMultipole: self._track_multipole,
            XCor: self._track_xcor,
            YCor: self._track_ycor,
            Solenoid: self._track_solenoid,
            SRot: self._track_srot,
        }

    def _find_map(self, component: Element) -> Optional[Callable]:
        for cls in type(component).__mro__:
            if cls in self._maps:
                return self._maps[cls]
        if isinstance(component, MultipoleMagnet):
            return self._track_multipole
        return None

    def track(self, bunch: ParticleBunch) -> ParticleBunch:
        """Transport the bunch through every component; the particles are updated in place."""
        if len(bunch) == 0:
            return bunch
        p0 = bunch.get_reference_momentum()
        # 1 / (B rho) of the tracked particles
        inv_brho = bunch.get_particle_charge() * SPEED_OF_LIGHT / (p0 * GEV)
        coords = bunch.as_array()
        for component in self.model:
            self.track_component(component, coords, inv_brho)
            if not np.all(np.isfinite(coords)):
                raise TrackingError(f"Non-finite coordinates after {component.name}")
        bunch.set_particles(coords)
        logger.debug(f"Tracked {len(bunch)} particles through {len(self.model)} components")
        return bunch

    def track_component(self, component: Element, coords: np.ndarray, inv_brho: float):
        """Apply the map of one component to an (N, 6) coordinate array in place."""
        transport = self._find_map(component)
        if transport is None:
            if self.strict and component.get_length() != 0:
                raise TrackingError(f"No transport map for {component.get_type()} {component.name}")
            self._drift(coords, component.get_length())
            return
        transport(component, coords, inv_brho)

    @staticmethod
    def _drift(coords: np.ndarray, length: float):
        if length == 0:
            return
        coords[:, X] += length * coords[:, XP]
        coords[:, Y] += length * coords[:, YP]

    @staticmethod
    def _transport_plane(coords: np.ndarray, u: int, up: int, K: np.ndarray, length: float,
                         drive: np.ndarray | float = 0.0):
        """Solve u'' + K u = drive over length."""
        C, S, D = _focusing_functions(K, length)
        u0, up0 = coords[:, u].copy(), coords[:, up].copy()
        coords[:, u] = C * u0 + S * up0 + D * drive
        coords[:, up] = -K * S * u0 + C * up0 + S * drive

    def _track_drift(self, drift: Drift, coords: np.ndarray, inv_brho: float):
        self._drift(coords, drift.length)

    def _track_sector_bend(self, bend: SectorBend, coords: np.ndarray, inv_brho: float):
        delta = coords[:, DP]
        h = bend.h
        kappa = bend.get_b0() * inv_brho
        k1 = bend.get_b1() * inv_brho / (1 + delta)
        _rotate(coords, bend.tilt)
        self._transport_plane(coords, X, XP, h * kappa + k1, bend.length, (h - kappa) + kappa * delta)
        self._transport_plane(coords, Y, YP, -k1, bend.length)
        _rotate(coords, -bend.tilt)

    def _track_quadrupole(self, quad: Quadrupole, coords: np.ndarray, inv_brho: float):
        k1 = quad.strength * inv_brho / (1 + coords[:, DP])
        self._transport_plane(coords, X, XP, k1, quad.length)
        self._transport_plane(coords, Y, YP, -k1, quad.length)

    def _track_skew_quadrupole(self, quad: SkewQuadrupole, coords: np.ndarray, inv_brho: float):
        _rotate(coords, np.pi / 4)
        k1 = quad.strength * inv_brho / (1 + coords[:, DP])
        self._transport_plane(coords, X, XP, k1, quad.length)
        self._transport_plane(coords, Y, YP, -k1, quad.length)
        _rotate(coords, -np.pi / 4)

    @staticmethod
    def _multipole_kick(field: MultipoleField, coords: np.ndarray, integrated: float):
        """Kick from B_y + i B_x = sum (b_n + i a_n)(x + i y)^n over an effective length."""
        z = coords[:, X] + 1j * coords[:, Y]
        total = np.zeros(len(coords), dtype=complex)
        for n in range(max(len(field.normal), len(field.skew))):
            bn = field.get_component(n) + 1j * field.get_component(n, skew=True)
            if bn != 0:
                total += bn * z ** n
        scale = integrated / (1 + coords[:, DP])
        coords[:, XP] -= scale * total.real
        coords[:, YP] += scale * total.imag

    def _track_multipole(self, magnet, coords: np.ndarray, inv_brho: float):
        length = magnet.get_length()
        effective = length if length != 0 else 1.0
        self._drift(coords, length / 2)
        self._multipole_kick(magnet.field, coords, inv_brho * effective)
        self._drift(coords, length / 2)

    def _corrector_kick(self, corrector, coords: np.ndarray, inv_brho: float) -> np.ndarray:
        length = corrector.get_length()
        effective = length if length > 0 else 1.0
        return corrector.get_field_strength() * inv_brho * effective / (1 + coords[:, DP])

    def _track_xcor(self, corrector: XCor, coords: np.ndarray, inv_brho: float):
        length = corrector.get_length()
        self._drift(coords, length / 2)
        coords[:, XP] -= self._corrector_kick(corrector, coords, inv_brho)
        self._drift(coords, length / 2)

    def _track_ycor(self, corrector: YCor, coords: np.ndarray, inv_brho: float):
        length = corrector.get_length()
        self._drift(coords, length / 2)
        coords[:, YP] += self._corrector_kick(corrector, coords, inv_brho)
        self._drift(coords, length / 2)

    def _track_solenoid(self, solenoid: Solenoid, coords: np.ndarray, inv_brho: float):
        length = solenoid.length
        K = solenoid.bz * inv_brho / 2 / (1 + coords[:, DP])
        if np.all(K == 0):
            self._drift(coords, length)
            return
        C, S = np.cos(K * length), np.sin(K * length)
        # S/K tends to the length for K -> 0
        safe_K = np.where(K == 0, 1.0, K)
        S_over_K = np.where(K == 0, length, S / safe_K)
        x, xp, y, yp = (coords[:, i].copy() for i in (X, XP, Y, YP))
        coords[:, X] = C * C * x + S_over_K * C * xp + S * C * y + S_over_K * S * yp
        coords[:, XP] = -K * S * C * x + C * C * xp - K * S * S * y + S * C * yp
        coords[:, Y] = -S * C * x - S_over_K * S * xp + C * C * y + S_over_K * C * yp
        coords[:, YP] = K * S * S * x - S * C * xp - K * S * C * y + C * C * yp

    def _track_srot(self, srot: SRot, coords: np.ndarray, inv_brho: float):
        _rotate(coords, srot.angle)
