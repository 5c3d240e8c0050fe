"""Core modules for the Clarity finance tracker."""

from . import config, features, insights, pagination, reports, sources, synth, utils, viz

__all__ = [
	"config",
	"features",
	"insights",
	"pagination",
	"reports",
	"sources",
	"synth",
	"utils",
	"viz",
]
