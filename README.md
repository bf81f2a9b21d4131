# torchscene

The CPU side of a deferred 3D renderer. It holds an entity-component scene, an
orbiting editor camera, environment entities (atmospheric scattering and cascaded
shadow maps), and post-process effects (bloom and SSAO). It works out the matrices,
uniform values and pass parameters that a GPU backend needs.

Matrices are 4x4 `numpy` arrays. They follow OpenGL conventions: column vectors,
a right-handed view space and a depth range of [-1, 1]. A point `p` is transformed
as `m @ p`. Quaternions are arrays in `(w, x, y, z)` order.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `torchscene.glmath` | `normalize`, `perspective`, `look_at`, `ortho`, `translate`, `scale`, `quat_from_euler`, `quat_to_mat4`, `quat_rotate` |
| `torchscene.camera` | `Camera`, `EditorCamera` |
| `torchscene.geometry` | `CUBE_VERTICES`, `QUAD_VERTICES`, `capture_projection`, `capture_views`, `prefilter_mip_sizes`, `prefilter_roughness` |
| `torchscene.shaders` | `ShaderSources`, `ShaderManager` |
| `torchscene.components` | `EntityType` and the component dataclasses |
| `torchscene.scene` | `Registry`, `Entity`, `Scene` |
| `torchscene.model_manager` | `ModelManager` |
| `torchscene.scene_manager` | `SceneManager` |
| `torchscene.environment` | `EnvironmentEntityType`, `AtmosphericScattering`, `EnvironmentManager` and the specifications |
| `torchscene.shadows` | `CascadeShadowMap`, `frustum_corners_world_space` |
| `torchscene.postprocess` | `Bloom`, `SSAO`, `PostProcessFactory`, `MinStdRand0` and helpers |

## Scenes and components

```python
from torchscene.scene import Scene
from torchscene.components import EntityType, LabelComponent, TransformComponent

scene = Scene()
entity = scene.create_entity("cube", EntityType.GENERAL)
entity.get_component(LabelComponent).label    # "cube"
transform = entity.get_component(TransformComponent)
transform.translation = (1.0, 2.0, 3.0)
transform.matrix()                            # translate @ rotate @ scale
```

A new entity gets a `UUIDComponent`, a `LabelComponent`, an `EntityTypeComponent`,
a `ModelComponent` and a `TransformComponent`. An entity holds at most one component
of each type. `Entity.add_component` returns `False` if a component of that type is
already attached. `Entity.get_component` raises `KeyError` when the entity has no
component of the requested type. `Scene.remove_entity` destroys the entity and
clears the selection if that entity was selected.

`SceneManager.get_instance()` holds the active scene and camera.
`shadow_casters()` yields `(entity, model matrix, model)` for every entity that is
not a light. `geometry_pass_uniforms()` returns the camera's view and projection
matrices and, for each entity, its uniforms, its texture bindings from
`MaterialComponent` and its model. It raises `RuntimeError` if no camera has been
set.

## Editor camera

```python
from torchscene.camera import EditorCamera

camera = EditorCamera(45.0, 16 / 9, 0.1, 1000.0)
camera.set_viewport_size(1920, 1080)
camera.update(control_held=True, mouse_offset=(0.1, 0.0),
              left_pressed=True, right_pressed=False, scroll_offset=0.0)
camera.view_projection()
```

`update` does nothing unless `control_held` is true. When the camera has focus, the
left button rotates the camera, the right button pans it, and the scroll offset
zooms it. Zooming never brings the camera closer than a distance of 1: once it
reaches that distance, the focal point moves forward instead.

## Models and shaders

`ModelManager(loader)` calls `loader(path)` once for each path and caches the
result. `render_model(path)` calls `render()` on the cached model, and raises
`KeyError` if that path was never loaded.

`ShaderManager.get_instance().initialize(root)` registers every shader program the
renderer uses, for example `"geometry_pass"`, `"ssao"` and `"bloom_downsample"`.
Their stage files live under `root/assets/shader`. `get(name)` returns the program's
`ShaderSources`.

## Environment and shadows

`EnvironmentManager.get_instance()` stores one environment entity for each
`EnvironmentEntityType`. `get_entity` raises `KeyError` for a type that is not
registered, while `find_entity` returns `None`. `AtmosphericScattering` starts from
`AtmosphericScatteringSpecification.default()`, and `shader_uniforms()` gives the
values for the sky shader.

`CascadeShadowMap(camera)` splits the camera's near-to-far range at the cascade
levels (10, 20, 80, 640 and 5000 by default). For each slice it fits an
orthographic light projection that looks along the sun direction of the registered
atmosphere. It raises `RuntimeError` when no atmosphere is registered.

## Post-processing

`PostProcessFactory(width, height, camera)` hands out a single shared `Bloom` and a
single shared `SSAO`. Bloom builds a halving mip chain with `build_bloom_mip_chain`
and reports the compute work-group counts of its down- and up-sampling passes.
SSAO generates a 64-sample hemisphere kernel and 16 noise vectors from
`MinStdRand0`, which is a deterministic Park-Miller generator.

## What this package does not do

The package makes no graphics API calls. It does not create windows, framebuffers
or textures, it does not compile shaders, and it does not draw anything. It does
not read model or image files either: `ModelManager` relies on the loader you pass
to it. It also has no command-line program. It computes the scene state, matrices,
uniform values and pass sizes, and it is up to a rendering backend to use them.