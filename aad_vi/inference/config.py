# inference/config.py
"""
Configuration for the variational guides.
"""

from dataclasses import dataclass


@dataclass
class InferenceConfig:
    """
    Settings shared by BBVIGuide and ReparamGuide.

    Attributes:
        bbvi_decay: exponent of the Robbins-Monro step rho = iteration ** -decay
            used for the control-variate moving average
        control_weight_floor: below this accumulated weight the control
            variate is taken as 0
        reparam_scale: bound of the tanh clamp applied to pathwise gradients
            in the Normal location-scale sample
        verbose: print per-step diagnostics
    """
    bbvi_decay: float = 0.5
    control_weight_floor: float = 1e-12
    reparam_scale: float = 5.0
    verbose: bool = False

    def __post_init__(self):
        if not 0.0 < self.bbvi_decay <= 1.0:
            raise ValueError(f"bbvi_decay must be in (0, 1], got {self.bbvi_decay}")
        if self.control_weight_floor < 0.0:
            raise ValueError(
                f"control_weight_floor must be >= 0, got {self.control_weight_floor}"
            )
        if self.reparam_scale <= 0.0:
            raise ValueError(f"reparam_scale must be > 0, got {self.reparam_scale}")
