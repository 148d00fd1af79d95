# ibiscus

The scene-side logic of a small 3D renderer, written with numpy and Pillow.
It works out matrices, uniform values, buffer layouts and draw parameters.
Your own renderer passes them on to the GPU.

## What is in it

- `ibiscus.transforms`: 4×4 matrix and vector helpers. They are `translate`, `scale`, `quat_to_mat4`, `look_at`, `perspective`, `normalize`, `rotate_vector` and `angle_between`. Matrices are row-major numpy arrays, applied as `matrix @ column_vector`. Quaternions are `(w, x, y, z)`.
- `ibiscus.camera`: `Camera`, a first-person camera. It has:
  - `update_cursor` for mouse-look from absolute cursor positions, with pitch clamped to ±89°
  - `move_camera` for turning by the distance from the window centre
  - `apply_inputs` for movement with the `Movement` keys (`FORWARD`, `LEFT`, `BACKWARD`, `RIGHT`)
  - `update_matrix`, which fills `view_matrix`, `projection_matrix` and `camera_matrix`
- `ibiscus.world`: `parse_world` and `load_world` read the line-based world format into `WorldData`. Spaces are ignored and lines starting with `#` are comments. The tags are:
  - `<v>` vertices
  - `<i>` indices
  - `<p>` position
  - `<s>` size
  - `<e>` entities
  - `<l>` lights

  `WorldData.model_matrix()` and `WorldData.translation_matrix()` build the world transform.
- `ibiscus.collision`:
  - `Collision`, an axis-aligned box. It offers `precalculate_box_bounds`, `contains_point`, `intersects_bounds`, `is_level_colliding_with_player` and `resort_vertices`.
  - `point_in_triangle` and `dot`
  - a plain `Inertia` record holding a velocity
- `ibiscus.shader`: `read_contents` returns a file's bytes, or empty bytes if the file cannot be opened. `ShaderSource.load` reads a vertex/fragment pair.
- `ibiscus.texture`: `Texture` decodes an image file with Pillow into bottom-up pixel rows. The `PixelFormat` is `RED`, `RGB` or `RGBA`. `pixel_format_for_channels` raises `ValueError` for other channel counts.
- `ibiscus.mesh`:
  - `Vertex` holds position, normal, colour and UV.
  - `Mesh` has `attribute_layouts()`, which gives `AttributeLayout` entries; instance-matrix columns are added when `instances != 1`.
  - `texture_uniforms()` gives `diffuse0`, `specular0`, … with their texture units.
  - `draw_state(camera, ...)` gives a `DrawState` with uniforms and index counts.
- `ibiscus.model`: `Model` loads a glTF file and its first binary buffer. It walks the node tree from node 0 and builds one `Mesh` per mesh node. The loader reads:
  - `POSITION`, `NORMAL` and `TEXCOORD_0` of the first primitive
  - indices of `ComponentType` `SHORT`, `UNSIGNED_SHORT` or `UNSIGNED_INT`
  - textures whose image URI contains `baseColor` (diffuse) or `metallicRoughness` (specular)

  `draw_states(camera)` returns the draw state of every mesh. The module also provides `group_floats`, `assemble_vertices` and `generate_instance_matrix`.
- `ibiscus.lighting`: `LightBlock` is a small light cube. It has `model_matrix`, `translation_matrix`, `index_count` and `uniforms(camera_position)`.
- `ibiscus.skybox`: `Skybox` gives a translation-free `view_matrix` and a fixed 45° `projection_matrix`. `load_faces(base_dir)` loads the six cube-map faces as RGB images, or `None` for faces that cannot be read.
- `ibiscus.interface`: `InterfaceFrame` is a flat coloured frame. `InterfaceFrame.create` reads its shader from a directory. `uniforms()` returns its `Position` and `Colour` values.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Examples

### Camera

```python
import numpy as np
from ibiscus.camera import Camera, Movement

camera = Camera(1280, 720, np.zeros(3))
camera.update_cursor(640.0, 360.0)
camera.apply_inputs({Movement.FORWARD})
camera.update_matrix(60.0, 0.1, 100.0)
print(camera.camera_matrix)
```

### World files

```python
from ibiscus.world import parse_world

world = parse_world("""
# a unit box
<p> 0, 0, 0
<s> 1, 2, 1
<v> -1, 0, 1, 0, 1, 0
<i> 0, 1, 2
""")
print(world.model_matrix())
```

### Collision

```python
from ibiscus.collision import Collision, point_in_triangle

box = Collision()
box.precalculate_box_bounds((0, 0, 0), (2, 2, 2))
box.contains_point((0.5, 0.5, 0.5))        # True
point_in_triangle((0.2, 0.2, 0), (0, 0, 0), (1, 0, 0), (0, 1, 0))  # True
```

### glTF models

```python
from ibiscus.model import Model

model = Model("meshes/scene.gltf", (1.0, 0.0, 0.0, 0.0), (1, 1, 1), (0, 0, 0), 1)
for state in model.draw_states(camera):
    print(state.index_count, sorted(state.uniforms))
```

`Model` raises `ValueError` if the file holds no glTF document, or if an accessor reaches past the end of the buffer.

## What it does not do

- It does not open a window or read the keyboard and mouse.
- It does not compile shaders or call any graphics API.
- It has no command-line program or render loop.

The caller supplies input as cursor positions and `Movement` keys, and sends the computed state to a GPU.

## Running the tests

```
pytest
```