def policy(env):
    # Strategy: chase the item that will reach the basket mouth first, preferring hearts
    # when two arrive at about the same time. Move the pointer toward that item's center
    # and hold still once the basket is under it.
    snapshot = env.engine.snapshot()
    geometry = snapshot.geometry
    catcher = snapshot.catcher
    size = geometry.item_size

    target = None
    best = None
    for item in snapshot.items:
        frames_left = (geometry.height - item.bottom(size)) / item.fall_speed
        if frames_left < 0:
            continue  # Already below the basket mouth
        key = (round(frames_left / 10), 0 if item.kind.value == "rare" else 1, frames_left)
        if best is None or key < best:
            best = key
            target = item

    if target is None:
        goal_x = geometry.width / 2
    else:
        goal_x = target.center_x(size)

    # The basket follows the pointer, so steer the pointer itself
    basket_center = env.pointer_x
    dead_zone = max(catcher.width / 4, env.POINTER_SPEED / 2)
    if goal_x < basket_center - dead_zone:
        return [3, 0, 0]  # Move left
    elif goal_x > basket_center + dead_zone:
        return [4, 0, 0]  # Move right
    else:
        return [0, 0, 0]  # Hold
