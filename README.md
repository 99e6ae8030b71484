# calogeo

`calogeo` describes a sampling calorimeter as a tree of named volumes. The
calorimeter is a stack of absorber plates and sensitive layers. The package
also turns energy deposits in those volumes into per-event hit columns, and
can write the geometry to an SQLite file.

The calorimeter has two sections:

* **ECAL** (`layers`): lead plates with scintillator layers. The scintillator
  layers are wide PVT bars, thin polystyrene bars, or aluminium-cased fibre
  layers.
* **HCAL** (`layers2`): iron plates with wide bars or fibre layers.

The stack can be repeated over a grid of modules.

## Installation

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install ".[test]"
pytest
```

## Calorimeter configuration

A calorimeter is described by a plain `key = value` file. Text after `#` is
ignored. Lines without `=` and unknown keys are ignored too.

```
# ECAL: lead, wide horizontal bars, lead, thin vertical bars, fibre layer
layers  = 7,1,7,4,5
# HCAL: iron and wide bars
layers2 = 7,2,7,1

plate_xy_mm             = 2160
lead_thickness_mm       = 3
wide_scint_thickness_mm = 10
thin_scint_thickness_mm = 10
hpl_thickness_mm        = 50
fiber_diameter_mm       = 1.2
iron_thickness_mm       = 170
airgap_mm               = 1000
gap_ecal_hcal           = 0
center_stack            = true

module_nx = 1
module_ny = 1
module_pitch_x_mm = 0   # 0 means use plate_xy_mm
module_pitch_y_mm = 0
```

The values above are the defaults of `CalorimeterConfig`, apart from the two
layer lists. `center_stack` is true for `1`, `true`, `yes` or `on`, in any
case, and false for anything else.

Layer codes:

| code | ECAL (`layers`)                   | HCAL (`layers2`)            |
|------|-----------------------------------|-----------------------------|
| 1    | wide PVT bars, horizontal         | wide PVT bars, horizontal   |
| 2    | wide PVT bars, vertical           | wide PVT bars, vertical     |
| 3    | thin polystyrene bars, horizontal | not allowed                 |
| 4    | thin polystyrene bars, vertical   | not allowed                 |
| 5    | fibre layer, fibres along Y       | fibre layer, fibres along Y |
| 6    | fibre layer, fibres along X       | fibre layer, fibres along X |
| 7    | lead plate                        | iron plate                  |
| 8    | air gap                           | air gap                     |

The `layers` key is required; `parse_config` raises `ValueError` without it,
or when a value cannot be read as a number. `read_config_file` raises
`OSError` when the file cannot be opened.

```python
from calogeo.config import read_config_file
from calogeo.builder import total_thickness_mm

cfg = read_config_file("calo.cfg")
print(total_thickness_mm(cfg))
```

`total_thickness_mm` adds up both sections and `gap_ecal_hcal`. Codes it does
not know count as zero. `parse_config` reads the same format from a string,
and `parse_int_list` parses a single comma-separated list of integers.

## Building the geometry

```python
from calogeo.config import read_config_file
from calogeo.materials import MaterialManager
from calogeo.world import build_world

cfg = read_config_file("calo.cfg")
materials = MaterialManager()
world = build_world(cfg, materials)

for name, transform, volume in world.walk():
    print(name, transform.translation)
```

`build_world` lays out `module_nx` × `module_ny` module containers centred on
the origin. The containers are named `MODULE_MX<i>Y<j>`, with indices starting
at 1. Each container holds a stack built by `calogeo.builder.build_stack`.
`PhysVol.walk` yields every descendant depth-first, with its transform in the
frame of the volume walked from.

`build_stack` raises `ValueError` for a code that a section does not accept.
When `center_stack` is true, the stack starts at minus half its depth. That
depth does not include `gap_ecal_hcal`.

Volume names show where each volume sits. For example,
`ECAL_GL3_SL1_WidePVT_H_L0_B17_MX1Y1` means ECAL, global layer 3, sensitive
layer 1, wide horizontal bar layer 0, bar 17, module (1, 1). Fibre layers hold
three sublayers of 1800 fibres each. Their names end in
`_HPL_<V_|H_><index>_S<sublayer>_F<fibre>` and the module tag.

Lower-level pieces live in these modules:

* `calogeo.geometry` has `Box`, `Tube`, `LogVol`, `PhysVol`, `Transform` and
  `BarAxis`. It also has `place_bars` and `build_pvt_bar_layer`, which places
  36 bars at a 60 mm pitch.
* `calogeo.fibres` has `build_hp_layer`. It builds a fibre layer in an
  aluminium casing and returns the casing volume.
* `calogeo.materials` has `Element`, `Material` and `MaterialManager`.
  `MaterialManager` provides air, lead, iron, PVT, polystyrene and aluminium.
  `rgba_for` gives a material's display colour, which is white and opaque for
  names it does not know.

`calogeo.world.is_sensitive` tells which logical volume names count as
sensitive. `calogeo.world.vis_colour_for` gives the colour used to draw a
logical volume, or `None` to keep the default.

## Hits

`calogeo.hits.HitAggregator` sums energy deposits per volume name during an
event. `process_step` records each step at the midpoint of its two end points.
It returns `False` and records nothing when the energy is zero or less, or the
name is empty.

`end_of_event` writes one row to an `EventStore` for each volume that received
energy. The row holds the summed energy and the energy-weighted mean position.
The volume name is decoded with `parse_volume_name`.

`EventStore.columns()` returns the row as a dict with these keys:

* `edep`, `x`, `y`, `z`
* `type`, `section`, `layer`, `vol`
* `hcal`, `hpl_subsection`, `hexant`

`parse_volume_name` fills each field as follows:

* `type` is a `VolumeType` code.
* `hcal` is 0 for names containing `ECAL_`, 1 for `HCAL_`, and -1 otherwise.
* `section` is 1 only for names beginning with `Hcal_`.
* `layer` comes from `_SL<n>`.
* `vol` comes from `_F<n>`, or else from `_B<n>`.
* `hpl_sublayer` comes from `_S<n>`.
* `hexant` is `10*mx + my` from a trailing `_MX<mx>Y<my>`, or 11 without one.

Missing fields are -1.

```python
from calogeo.hits import HitAggregator, EventStore

store = EventStore()
agg = HitAggregator()
agg.process_step("ECAL_GL1_SL0_WidePVT_H_L0_B5_MX1Y1", 2.0,
                 (0.0, 0.0, 10.0), (0.0, 0.0, 12.0))
agg.end_of_event(store)
print(store.columns())
```

Call `store.clear()` and `agg.clear()` between events.

## Run configuration and particle gun

A run is described by another `key = value` file. Lines starting with `#` are
comments. It accepts these keys:

* `n_events`, `particle`, `energy_MeV`
* `position_mm` and `direction`, each given as three numbers
* `sigma_xy_mm`, `macro`, `seed`
* `visualize`, `vis_macro`

An unknown key raises `ValueError`, and so does a line without `=`.

```python
import random
from calogeo.runconfig import read_run_config_file
from calogeo.gun import ParticleGun

run = read_run_config_file("run.cfg")
gun = ParticleGun(run, random.Random(run.seed))
vertex = gun.generate()
```

`ParticleGun` raises `ValueError` for a particle name outside
`calogeo.gun.KNOWN_PARTICLES`. It normalises the direction. If no random
generator is given, it seeds one from `seed` when `seed` is not zero. If
`sigma_xy_mm` is positive, it adds Gaussian smearing in x and y to the
configured position.

## Writing a geometry database

```
calogeo-make-db [OUTPUT [CALO_CFG]]
```

`OUTPUT` defaults to `geometry.db` and `CALO_CFG` to `../calo.cfg`. The
command builds a single stack in a 3 m air world (`create_world`) and writes
it to `OUTPUT`. It also writes the material colours to
`gmexMatVisAttributes.local.json` in the current directory. It exits with
status 1 if the database file cannot be opened.

The database holds these tables:

* `elements`, `materials`, `material_components`
* `shapes`, `logvols`, `physvols`
* `placements`, with a rotation matrix and a translation for each placement

Any of these tables already in the file are replaced. Every fibre is stored
as its own volume, so configurations with fibre layers give large files.

The same steps are available from `calogeo.make_db`:

* `create_world`
* `build_lead_plate`, which places a single lead plate with a bar layer on top
* `write_geometry_db`, which returns the number of volumes written
* `material_vis_json`
* `write_material_vis_json`

## What the package does not do

`calogeo` does not transport particles through the geometry. It has no
physics, event loop, visualisation or histogram output. The steps given to
`HitAggregator` and the vertices from `ParticleGun` have to be used by
whatever simulates the events. The `n_events`, `macro`, `visualize` and
`vis_macro` settings are read into `RunConfig` and kept there; nothing in the
package acts on them.