"""
Infinite Ocean Simulation

A headless, real-time 2D simulation core for an endless scrolling ocean.
A shark chases procedurally streamed fish, grows as it eats, and leaves
blood-cloud particles behind.

Architecture: OceanSimulation is the source of truth. Renderers and input
backends are consumers driven by the FrameOrchestrator.
"""

__version__ = "0.1.0"
