"""
latticekit Simulators - tracking collaborators for constructed models
"""

from latticekit.simulators.tracking import ParticleTracker

__all__ = ['ParticleTracker']
