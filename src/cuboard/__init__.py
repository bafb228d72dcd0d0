"""Cuboard: type text by turning the faces of a twisty puzzle."""
