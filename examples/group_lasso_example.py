import jax
import jax.numpy as jnp

from nano_proxnorm import mixed_norm, norm


def run_test():
    # Group lasso: minimize 0.5 * ||X W - Y||^2 / n + reg * sum_j ||W_j||_2
    # W has shape (num_features, num_tasks); each row is one group.
    key = jax.random.PRNGKey(0)
    x_key, w_key, noise_key = jax.random.split(key, 3)

    num_samples = 200
    num_features = 30
    num_tasks = 4
    reg = 0.1
    lr = 0.5
    num_steps = 300

    X = jax.random.normal(x_key, (num_samples, num_features))
    true_W = jax.random.normal(w_key, (num_features, num_tasks))
    true_W = true_W.at[5:].set(0.0)  # only the first 5 features are active
    Y = X @ true_W + 0.05 * jax.random.normal(noise_key, (num_samples, num_tasks))

    g = mixed_norm(X.dtype, 1, 2, 1)
    prox = g.as_prox(reg)

    def smooth_loss(W):
        residual = X @ W - Y
        return 0.5 * jnp.sum(residual**2) / num_samples

    @jax.jit
    def step(W, _):
        W = prox(W - lr * jax.grad(smooth_loss)(W), lr)
        return W, smooth_loss(W) + reg * g(W)

    print("Starting minimization (group-lasso least squares)...")
    W, trace = jax.lax.scan(step, jnp.zeros_like(true_W), None, length=num_steps)
    for i in range(0, num_steps, 50):
        print(f"Step {i:4d}: val={float(trace[i]):.6e}")

    active = jnp.flatnonzero(jnp.linalg.norm(W, axis=1) > 0)
    print("Active groups:", jax.device_get(active))

    # Same problem constrained to an l1 ball instead of penalized
    ball = norm(X.dtype, 2, 1)
    proj = ball.as_proj(radius=float(ball(true_W)))
    W_c = jnp.zeros_like(true_W)
    for _ in range(num_steps):
        W_c = proj(W_c - lr * jax.grad(smooth_loss)(W_c), lr)
    print("Constrained l1 norm:", float(ball(W_c)))


if __name__ == "__main__":
    run_test()
